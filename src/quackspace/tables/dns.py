"""Table for the Cloud DNS v1.0 REST API. DNS is a global service, so no region is needed."""
from ..clients import DNS
from ..normalize import Column, ColumnType as T
from ..pagination import LinkPager, iter_items, iter_pages
from .base import BaseTable


def domain_records(conn, domain, ctx):
    client = conn.rest_client(DNS)
    pager = LinkPager(client, f"domains/{domain['id']}/records", "records", links_key="links",
                      operation=f"list records for domain {domain.get('name')}")
    return list(iter_items(pager, ctx))


class DNSDomainTable(BaseTable):
    name = "rackspace_dns_domain"
    description = "Rackspace Cloud DNS domains."
    columns = [
        Column("id", T.STRING, "The unique identifier of the DNS domain."),
        Column("account_id", T.STRING, "The account ID associated with the DNS domain.", field="accountId"),
        Column("name", T.STRING, "The name of the DNS domain."),
        Column("ttl", T.INT, "Time-to-live for the domain, in seconds.", keep_zero=True),
        Column("email_address", T.STRING, "The contact email address for the DNS domain.", field="emailAddress"),
        Column("updated", T.TIMESTAMP, "When the DNS domain was last updated."),
        Column("created", T.TIMESTAMP, "When the DNS domain was created."),
        Column("records_list", T.JSON, "DNS records of the domain.", field="_records"),
    ]
    hydrators = {
        "_records": domain_records,
    }

    def list_pages(self, conn, quals, ctx):
        client = conn.rest_client(DNS)
        yield from iter_pages(LinkPager(client, "domains", "domains", links_key="links"), ctx)
