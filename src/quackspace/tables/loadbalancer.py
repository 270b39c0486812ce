"""Table for the Cloud Load Balancers v1.0 REST API."""
from ..clients import LOAD_BALANCERS
from ..exceptions import NotFoundError
from ..fetch import fetch_one
from ..normalize import Column, ColumnType as T
from ..pagination import LinkPager, iter_pages
from .base import BaseTable


class LoadBalancerTable(BaseTable):
    name = "rackspace_loadbalancer"
    description = "Rackspace Cloud Load Balancers."
    get_key = "id"
    columns = [
        Column("id", T.INT, "The unique ID of the load balancer."),
        Column("name", T.STRING, "The name of the load balancer."),
        Column("protocol", T.STRING, "The protocol used by the load balancer."),
        Column("port", T.INT, "The port on which the load balancer listens."),
        Column("algorithm", T.STRING, "The load balancing algorithm."),
        Column("status", T.STRING, "The status of the load balancer."),
        Column("timeout", T.INT, "The timeout for the load balancer, in seconds."),
        Column("node_count", T.INT, "The number of nodes attached to the load balancer.",
               field="nodeCount", keep_zero=True),
        Column("updated", T.TIMESTAMP, "When the load balancer was last updated.", field="updated.time"),
        Column("created", T.TIMESTAMP, "When the load balancer was created.", field="created.time"),
        Column("virtual_ips", T.JSON, "Virtual IPs associated with the load balancer.", field="virtualIps"),
        Column("connection_logging", T.BOOL, "Whether connection logging is enabled.",
               field="connectionLogging.enabled", keep_zero=True),
        Column("https_redirect", T.BOOL, "Whether HTTPS redirect is enabled.", field="httpsRedirect", keep_zero=True),
        Column("half_closed", T.BOOL, "Whether half-closed connections are enabled.", field="halfClosed", keep_zero=True),
        Column("content_caching", T.BOOL, "Whether content caching is enabled.",
               field="contentCaching.enabled", keep_zero=True),
        Column("cluster_name", T.STRING, "The cluster the load balancer runs on.", field="cluster.name"),
        Column("source_addresses", T.JSON, "Source IPv4 and IPv6 addresses of the load balancer.",
               field="sourceAddresses"),
    ]

    def list_pages(self, conn, quals, ctx):
        client = conn.rest_client(LOAD_BALANCERS)
        pager = LinkPager(client, "loadbalancers", "loadBalancers", links_key="links")
        yield from iter_pages(pager, ctx)

    def get_item(self, conn, key, ctx):
        try:
            lb_id = int(key)
        except (TypeError, ValueError):
            raise NotFoundError(f"{self.name}: {key!r} is not a load balancer id")
        return fetch_one(conn.rest_client(LOAD_BALANCERS), f"loadbalancers/{lb_id}", "loadBalancer", ctx)
