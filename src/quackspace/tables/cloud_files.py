"""
Tables backed by Cloud Files (Swift object storage): containers and objects.

Swift splits container data across two calls: the account listing returns
name, bytes and count, while the container HEAD returns only metadata
headers. A container row is therefore assembled from both.
"""
from dataclasses import asdict, dataclass, field
from typing import Dict, Optional
from urllib.parse import quote

from ..clients import ServiceClient, ServiceKind
from ..context import QueryContext
from ..fetch import composite_get, get_by_key
from ..normalize import Column, ColumnType as T
from ..pagination import MarkerPager, iter_pages
from .base import BaseTable

CONTAINER_META_PREFIX = "x-container-meta-"


@dataclass
class ContainerInfo:
    name: str
    bytes: Optional[int] = None
    count: Optional[int] = None
    metadata: Dict[str, str] = field(default_factory=dict)


def container_metadata(client: ServiceClient, name: str, ctx: QueryContext) -> Dict[str, str]:
    """Reads X-Container-Meta-* headers from a container HEAD, without the prefix."""
    response = client.head(quote(name), f"get metadata for container {name}", ctx)
    return {
        key[len(CONTAINER_META_PREFIX):]: value
        for key, value in response.headers.items()
        if key.lower().startswith(CONTAINER_META_PREFIX)
    }


def merge_container(listing: Dict, metadata: Dict[str, str]) -> ContainerInfo:
    """
    Combines a listing entry with HEAD metadata.

    The listing is authoritative for name, bytes and count; the HEAD call is
    authoritative for metadata. Neither source overlaps the other's fields.
    """
    return ContainerInfo(
        name=listing["name"],
        bytes=listing.get("bytes"),
        count=listing.get("count"),
        metadata=dict(metadata),
    )


def _hydrate_metadata(conn, container, ctx):
    return container_metadata(conn.catalog_client(ServiceKind.OBJECT_STORE, ctx), container["name"], ctx)


class CloudFilesContainerTable(BaseTable):
    name = "rackspace_cloud_files_container"
    description = "Rackspace Cloud Files containers."
    get_key = "name"
    columns = [
        Column("name", T.STRING, "The name of the container."),
        Column("bytes", T.INT, "Total bytes stored in the container.", keep_zero=True),
        Column("count", T.INT, "Number of objects stored in the container.", keep_zero=True),
        Column("metadata", T.JSON, "Metadata associated with the container."),
    ]
    hydrators = {
        "metadata": _hydrate_metadata,
    }

    def list_pages(self, conn, quals, ctx):
        client = conn.catalog_client(ServiceKind.OBJECT_STORE, ctx)
        yield from iter_pages(MarkerPager(client, "", operation="list containers"), ctx)

    def get_item(self, conn, key, ctx):
        client = conn.catalog_client(ServiceKind.OBJECT_STORE, ctx)
        pager = MarkerPager(client, "", params={"prefix": key}, operation="list containers")
        container = composite_get(
            lambda: get_by_key(pager, "name", key, ctx),
            lambda listing: container_metadata(client, listing["name"], ctx),
            merge_container,
        )
        return asdict(container)


class CloudFilesObjectTable(BaseTable):
    name = "rackspace_cloud_files_object"
    description = "Rackspace Cloud Files objects in a container."
    required_quals = ("container_name",)
    columns = [
        Column("container_name", T.STRING, "The name of the container holding the object.", qual="container_name"),
        Column("name", T.STRING, "The name of the object."),
        Column("content_type", T.STRING, "The content type of the object."),
        Column("bytes", T.INT, "The size of the object in bytes.", keep_zero=True),
        Column("last_modified", T.TIMESTAMP, "When the object was last modified."),
        Column("hash", T.STRING, "The MD5 hash of the object."),
        Column("subdir", T.STRING, "The pseudo-directory, for delimiter listings."),
        Column("is_latest", T.BOOL, "Whether the object version is the latest one.", keep_zero=True),
        Column("version_id", T.STRING, "The version ID of the object, when versioning is enabled."),
    ]

    def list_pages(self, conn, quals, ctx):
        container_name = quals["container_name"]
        client = conn.catalog_client(ServiceKind.OBJECT_STORE, ctx)
        pager = MarkerPager(client, quote(container_name), operation=f"list objects in {container_name}")
        yield from iter_pages(pager, ctx)
