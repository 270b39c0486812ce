"""Table for the Cloud Images (Glance v2) API."""
from ..clients import ServiceKind
from ..fetch import fetch_one
from ..normalize import Column, ColumnType as T
from ..pagination import NextFieldPager, iter_pages
from .base import BaseTable

# Everything else Glance returns is a free-form image property.
_IMAGE_FIELDS = {
    "id", "name", "status", "tags", "container_format", "disk_format", "min_disk", "min_ram",
    "owner", "protected", "visibility", "os_hidden", "checksum", "size", "metadata",
    "created_at", "updated_at", "file", "schema", "virtual_size", "self", "locations",
    "direct_url", "os_hash_algo", "os_hash_value",
}


def image_properties(item):
    return {k: v for k, v in item.items() if k not in _IMAGE_FIELDS}


class ImageTable(BaseTable):
    name = "rackspace_image"
    description = "Rackspace Cloud Images (Glance)."
    get_key = "id"
    columns = [
        Column("id", T.STRING, "The ID of the image."),
        Column("name", T.STRING, "Name of the image."),
        Column("status", T.STRING, "Status of the image, e.g. 'queued', 'active'."),
        Column("tags", T.JSON, "Tags associated with the image."),
        Column("container_format", T.STRING, "Container format of the image, e.g. 'ami', 'bare', 'ovf'."),
        Column("disk_format", T.STRING, "Disk format of the image, e.g. 'raw', 'vhd', 'qcow2'."),
        Column("min_disk", T.INT, "Minimum disk size required to boot the image, in GB.", keep_zero=True),
        Column("min_ram", T.INT, "Minimum RAM required to boot the image, in MB.", keep_zero=True),
        Column("owner", T.STRING, "Tenant ID the image belongs to."),
        Column("protected", T.BOOL, "Whether the image is protected from deletion.", keep_zero=True),
        Column("visibility", T.STRING, "Visibility of the image, e.g. 'public' or 'private'."),
        Column("hidden", T.BOOL, "Whether the image is hidden from default listings.", field="os_hidden", keep_zero=True),
        Column("checksum", T.STRING, "Checksum of the image data."),
        Column("size_bytes", T.INT, "Size of the image data, in bytes.", field="size"),
        Column("metadata", T.JSON, "Metadata associated with the image."),
        Column("properties", T.JSON, "Additional properties associated with the image.", derive=image_properties),
        Column("created_at", T.TIMESTAMP, "When the image was created."),
        Column("updated_at", T.TIMESTAMP, "When the image was last updated."),
        Column("file", T.STRING, "Location of the image file."),
        Column("schema", T.STRING, "Path to the JSON schema representing the image."),
        Column("virtual_size", T.INT, "Virtual size of the image, in bytes."),
    ]

    def list_pages(self, conn, quals, ctx):
        client = conn.catalog_client(ServiceKind.IMAGE, ctx)
        yield from iter_pages(NextFieldPager(client, "images", "images"), ctx)

    def get_item(self, conn, key, ctx):
        client = conn.catalog_client(ServiceKind.IMAGE, ctx)
        # Glance v2 returns the image itself, without an envelope
        return fetch_one(client, f"images/{key}", None, ctx, operation="get image")
