"""
Metadata document endpoints
"""

from fastapi import APIRouter, Depends, status

from .auth import get_program
from .schemas import BuildMetadataRequest
from ..metadata import AssetMetadata, build_asset_metadata
from ..program import RwaTokenProgram


router = APIRouter()


def _build(request: BuildMetadataRequest) -> AssetMetadata:
    return build_asset_metadata(
        name=request.name,
        description=request.description,
        image=request.image,
        attributes=[attribute.model_dump() for attribute in request.attributes],
        external_url=request.external_url
    )


@router.post("")
async def build_metadata(request: BuildMetadataRequest):
    """Build the metadata document for an asset without storing it"""
    return _build(request).model_dump()


@router.post("/documents", status_code=status.HTTP_201_CREATED)
async def publish_metadata(request: BuildMetadataRequest, program: RwaTokenProgram = Depends(get_program)):
    """Build and store a metadata document; register the asset with the returned URI"""
    document = _build(request)
    uri = program.publish_metadata(document)
    return {
        "id": program.metadata_store.parse_uri(uri),
        "uri": uri,
        "document": document.model_dump()
    }


@router.get("/documents/{document_id}")
async def get_metadata(document_id: str, program: RwaTokenProgram = Depends(get_program)):
    """Fetch a stored metadata document"""
    return program.get_metadata(document_id).model_dump()
