"""
Asset Metadata Documents

Shape of the JSON document an asset's metadata_uri points to, and a
storage-backed store that serves documents under ``local://`` URIs.
Remote URIs (https, ipfs, ar) are never dereferenced by the core.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from .logging_config import get_logger
from .storage import StorageInterface


class MetadataAttribute(BaseModel):
    trait_type: str
    value: Union[str, int, float]


class MetadataFile(BaseModel):
    uri: str
    type: str = "image/png"


class MetadataProperties(BaseModel):
    files: List[MetadataFile] = Field(default_factory=list)
    category: str = "image"


class AssetMetadata(BaseModel):
    """Off-system metadata document for a registered asset"""
    name: str
    description: str
    image: str
    external_url: str = ""
    attributes: List[MetadataAttribute] = Field(default_factory=list)
    properties: MetadataProperties = Field(default_factory=MetadataProperties)


def build_asset_metadata(
    name: str,
    description: str,
    image: str,
    attributes: Optional[List[dict]] = None,
    external_url: Optional[str] = None
) -> AssetMetadata:
    """
    Create the metadata document for an asset

    The image is also listed as the document's single file.
    """
    return AssetMetadata(
        name=name,
        description=description,
        image=image,
        external_url=external_url or "",
        attributes=[MetadataAttribute(**attribute) for attribute in attributes or []],
        properties=MetadataProperties(files=[MetadataFile(uri=image)])
    )


LOCAL_URI_SCHEME = "local://"


class MetadataStore:
    """
    Document store behind ``local://`` metadata URIs

    Issuers publish a document here and register the asset with the
    returned URI. URIs of any other scheme are left to the caller.
    """

    def __init__(self, storage: StorageInterface, table_name: str = "metadata_documents"):
        self.storage = storage
        self.table_name = table_name
        self.logger = get_logger("rwa.metadata")

    def upload(self, document: AssetMetadata) -> str:
        """Store a document and return its id"""
        document_id = f"local_{uuid.uuid4().hex}"
        self.storage.save(self.table_name, document_id, {
            "id": document_id,
            "created_at": datetime.now(timezone.utc).isoformat(),
            "document": document.model_dump()
        })
        self.logger.debug(f"Stored metadata document {document_id} for {document.name}")
        return document_id

    def fetch(self, document_id: str) -> Optional[AssetMetadata]:
        record = self.storage.load(self.table_name, document_id)
        if record is None:
            return None
        return AssetMetadata.model_validate(record["document"])

    def uri_for(self, document_id: str) -> str:
        return f"{LOCAL_URI_SCHEME}{document_id}"

    def parse_uri(self, uri: str) -> Optional[str]:
        """Document id of a ``local://`` URI, None for any other URI"""
        if not uri.startswith(LOCAL_URI_SCHEME):
            return None
        return uri[len(LOCAL_URI_SCHEME):] or None

    def resolve(self, uri: str) -> Optional[AssetMetadata]:
        """Document a metadata URI points to, if it is held here"""
        document_id = self.parse_uri(uri)
        if document_id is None:
            return None
        document = self.fetch(document_id)
        if document is None:
            self.logger.warning(f"Metadata document {document_id} not found for {uri}")
        return document
