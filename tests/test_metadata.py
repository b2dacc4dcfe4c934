"""
Tests for asset metadata documents
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from rwa_core.metadata import AssetMetadata, MetadataStore, build_asset_metadata
from rwa_core.storage import InMemoryStorage


class TestAssetMetadata:
    """Test building metadata documents"""

    def test_build_document(self):
        document = build_asset_metadata(
            name="Farm",
            description="Forty acres of farmland",
            image="https://example.com/farm.png",
            attributes=[
                {"trait_type": "Acres", "value": 40},
                {"trait_type": "Region", "value": "Iowa"}
            ],
            external_url="https://example.com/farm"
        )

        assert document.name == "Farm"
        assert document.external_url == "https://example.com/farm"
        assert [a.trait_type for a in document.attributes] == ["Acres", "Region"]
        assert document.attributes[0].value == 40
        assert document.properties.category == "image"
        assert [f.uri for f in document.properties.files] == ["https://example.com/farm.png"]
        assert document.properties.files[0].type == "image/png"

    def test_defaults(self):
        document = build_asset_metadata(name="Art", description="", image="ipfs://art")

        assert document.attributes == []
        assert document.external_url == ""

    def test_serializes_to_json(self):
        document = build_asset_metadata(name="Art", description="", image="ipfs://art")

        restored = AssetMetadata.model_validate_json(document.model_dump_json())
        assert restored == document

    def test_rejects_malformed_attribute(self):
        with pytest.raises(PydanticValidationError):
            build_asset_metadata(
                name="Art", description="", image="ipfs://art",
                attributes=[{"value": "missing trait type"}]
            )


class TestMetadataStore:
    """Test storing and resolving documents under local:// URIs"""

    def setup_method(self):
        self.storage = InMemoryStorage()
        self.store = MetadataStore(self.storage)
        self.document = build_asset_metadata(
            name="Farm",
            description="Forty acres",
            image="https://example.com/farm.png",
            attributes=[{"trait_type": "Acres", "value": 40}]
        )

    def test_upload_and_fetch(self):
        document_id = self.store.upload(self.document)

        assert document_id.startswith("local_")
        assert self.store.fetch(document_id) == self.document

    def test_upload_ids_are_unique(self):
        assert self.store.upload(self.document) != self.store.upload(self.document)

    def test_fetch_missing(self):
        assert self.store.fetch("local_missing") is None

    def test_uri_round_trip(self):
        document_id = self.store.upload(self.document)
        uri = self.store.uri_for(document_id)

        assert uri == f"local://{document_id}"
        assert self.store.parse_uri(uri) == document_id
        assert self.store.resolve(uri) == self.document

    def test_foreign_uris_are_not_resolved(self):
        assert self.store.parse_uri("https://example.com/farm.json") is None
        assert self.store.resolve("https://example.com/farm.json") is None
        assert self.store.parse_uri("local://") is None

    def test_resolve_missing_document(self):
        assert self.store.resolve("local://local_gone") is None

    def test_documents_persist_in_storage(self):
        document_id = self.store.upload(self.document)

        reopened = MetadataStore(self.storage)
        assert reopened.fetch(document_id).name == "Farm"
