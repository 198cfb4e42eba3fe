"""Generator dispatch: one function per parameter variant."""

from ..mesh import RawMesh
from ..params import (
    BraceletParams,
    CharmAttachmentParams,
    CoasterParams,
    CylinderBaseParams,
    JewelryHolderParams,
    MonitorStandParams,
    NapkinHolderParams,
    PencilHolderParams,
    PhoneHolderParams,
    RadialProfileParams,
    RingParams,
    ShapeParams,
    UploadedMeshParams,
    WallArtParams,
)
from . import composite, open_ring, outline, planar, radial, uploaded

GENERATORS = {
    RadialProfileParams: radial.generate,
    CoasterParams: planar.coaster,
    WallArtParams: planar.wall_art,
    BraceletParams: open_ring.bracelet,
    RingParams: open_ring.ring,
    PencilHolderParams: outline.pencil_holder,
    PhoneHolderParams: composite.phone_holder,
    CylinderBaseParams: composite.cylinder_base,
    MonitorStandParams: composite.monitor_stand,
    JewelryHolderParams: composite.jewelry_holder,
    NapkinHolderParams: composite.napkin_holder,
    CharmAttachmentParams: composite.charm_attachment,
    UploadedMeshParams: uploaded.uploaded_mesh,
}


def generate(params: ShapeParams) -> RawMesh:
    """Build the unscaled solid for ``params`` (normalized on the way in)."""
    try:
        builder = GENERATORS[type(params)]
    except KeyError:
        raise TypeError(f"No generator for {type(params).__name__}") from None
    return builder(params)
