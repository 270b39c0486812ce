"""Table for the Cloud Queues (Marconi v1) REST API."""
from urllib.parse import quote

from ..clients import QUEUES
from ..normalize import Column, ColumnType as T
from ..pagination import LinkPager, iter_pages
from .base import BaseTable


def queue_stats(conn, queue, ctx):
    client = conn.rest_client(QUEUES)
    body = client.get_object(f"queues/{quote(queue['name'])}/stats", "get queue stats", ctx)
    return body.get("messages")


def queue_metadata(conn, queue, ctx):
    client = conn.rest_client(QUEUES)
    return client.get_json(f"queues/{quote(queue['name'])}/metadata", "get queue metadata", ctx)


class MessageQueueTable(BaseTable):
    name = "rackspace_message_queue"
    description = "Rackspace Cloud Queues."
    columns = [
        Column("name", T.STRING, "The name of the queue."),
        Column("href", T.STRING, "The URL of the queue."),
        # an idle queue has all-zero stats, which is still an answer
        Column("stats", T.JSON, "Message statistics for the queue.", field="_stats", keep_zero=True),
        Column("metadata", T.JSON, "Metadata associated with the queue.", field="_metadata"),
    ]
    hydrators = {
        "_stats": queue_stats,
        "_metadata": queue_metadata,
    }

    def list_pages(self, conn, quals, ctx):
        client = conn.rest_client(QUEUES)
        yield from iter_pages(LinkPager(client, "queues", "queues", links_key="links"), ctx)
