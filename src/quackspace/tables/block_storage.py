"""Tables backed by the Cloud Block Storage v1 REST API: volumes and snapshots."""
from ..clients import BLOCK_STORAGE
from ..fetch import fetch_one
from ..normalize import Column, ColumnType as T
from ..pagination import SinglePager, iter_pages
from .base import BaseTable


class VolumeTable(BaseTable):
    name = "rackspace_volume"
    description = "Rackspace Cloud Block Storage volumes."
    get_key = "id"
    columns = [
        Column("id", T.STRING, "The ID of the volume."),
        Column("display_name", T.STRING, "The name of the volume."),
        Column("status", T.STRING, "The current status of the volume, e.g. 'available', 'in-use'."),
        Column("size", T.INT, "Size of the volume in GB.", keep_zero=True),
        Column("created_at", T.TIMESTAMP, "When the volume was created."),
        Column("availability_zone", T.STRING, "The availability zone where the volume is located."),
        Column("bootable", T.STRING, "Whether the volume is bootable ('true'/'false')."),
        Column("encrypted", T.BOOL, "Whether the volume is encrypted.", keep_zero=True),
        Column("volume_type", T.STRING, "The type of the volume, e.g. SATA or SSD."),
        Column("snapshot_id", T.STRING, "The snapshot the volume was created from, if any."),
        Column("source_volid", T.STRING, "The ID of the source volume, if any."),
        Column("display_description", T.STRING, "The description of the volume."),
        Column("multiattach", T.STRING, "Whether the volume supports multiple attachments."),
        Column("metadata", T.JSON, "Metadata associated with the volume."),
        Column("attachments", T.JSON, "The attached devices information for the volume."),
    ]

    def list_pages(self, conn, quals, ctx):
        client = conn.rest_client(BLOCK_STORAGE)
        yield from iter_pages(SinglePager(client, "volumes", "volumes"), ctx)

    def get_item(self, conn, key, ctx):
        return fetch_one(conn.rest_client(BLOCK_STORAGE), f"volumes/{key}", "volume", ctx)


class SnapshotTable(BaseTable):
    name = "rackspace_snapshot"
    description = "Rackspace Cloud Block Storage snapshots."
    get_key = "id"
    columns = [
        Column("id", T.STRING, "The ID of the snapshot."),
        Column("display_name", T.STRING, "The name of the snapshot."),
        Column("volume_id", T.STRING, "The ID of the volume the snapshot was taken from."),
        Column("status", T.STRING, "The current status of the snapshot, e.g. 'available', 'error'."),
        Column("size", T.INT, "Size of the snapshot in GB.", keep_zero=True),
        Column("created_at", T.TIMESTAMP, "When the snapshot was created."),
        Column("display_description", T.STRING, "Description of the snapshot."),
        Column("metadata", T.JSON, "Metadata associated with the snapshot."),
    ]

    def list_pages(self, conn, quals, ctx):
        client = conn.rest_client(BLOCK_STORAGE)
        yield from iter_pages(SinglePager(client, "snapshots", "snapshots"), ctx)

    def get_item(self, conn, key, ctx):
        return fetch_one(conn.rest_client(BLOCK_STORAGE), f"snapshots/{key}", "snapshot", ctx)
