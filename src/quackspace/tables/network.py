"""
Tables backed by the Cloud Networks (Neutron v2.0) REST API.

These call the regional REST endpoint directly; the catalog URL for this
service already carries the version, and appending resource paths to it
produces URLs with the version twice.
"""
from ..clients import NETWORKS
from ..normalize import Column, ColumnType as T
from ..pagination import LinkPager, iter_pages
from .base import BaseTable


class _NeutronTable(BaseTable):
    """Neutron collections all page the same way: a `<collection>_links` next link."""
    resource = ""
    collection = ""

    def list_pages(self, conn, quals, ctx):
        client = conn.rest_client(NETWORKS)
        yield from iter_pages(LinkPager(client, self.resource, self.collection), ctx)


class NetworkTable(_NeutronTable):
    name = "rackspace_network"
    description = "Rackspace Cloud Networks."
    resource = "networks"
    collection = "networks"
    columns = [
        Column("id", T.STRING, "The unique ID of the network."),
        Column("name", T.STRING, "The name of the network."),
        Column("admin_state_up", T.BOOL, "The administrative state of the network.", keep_zero=True),
        Column("status", T.STRING, "The operational status of the network."),
        Column("subnets", T.JSON, "Subnets associated with the network."),
        Column("tenant_id", T.STRING, "The tenant that owns the network."),
        Column("shared", T.BOOL, "Whether the network is shared across tenants.", keep_zero=True),
    ]


class NetworkPortTable(_NeutronTable):
    name = "rackspace_network_port"
    description = "Rackspace Cloud Networks ports."
    resource = "ports"
    collection = "ports"
    columns = [
        Column("id", T.STRING, "The unique identifier of the network port."),
        Column("name", T.STRING, "The name of the network port."),
        Column("status", T.STRING, "The status of the network port."),
        Column("admin_state_up", T.BOOL, "Whether the administrative state of the port is up.", keep_zero=True),
        Column("network_id", T.STRING, "The network the port is attached to."),
        Column("tenant_id", T.STRING, "The tenant that owns the port."),
        Column("device_owner", T.STRING, "The entity using this port, such as `compute:None`."),
        Column("mac_address", T.STRING, "The MAC address of the port."),
        Column("fixed_ips", T.JSON, "Fixed IP addresses associated with the port."),
        Column("security_groups", T.JSON, "Security groups associated with the port."),
        Column("device_id", T.STRING, "The ID of the device using this port."),
    ]


class NetworkSecurityGroupTable(_NeutronTable):
    name = "rackspace_network_security_group"
    description = "Rackspace Cloud Networks security groups."
    resource = "security-groups"
    collection = "security_groups"
    columns = [
        Column("id", T.STRING, "The unique identifier of the security group."),
        Column("name", T.STRING, "The name of the security group."),
        Column("tenant_id", T.STRING, "The tenant associated with the security group."),
        Column("description", T.STRING, "The description of the security group."),
        Column("external_service_id", T.STRING, "External service ID associated with the group, if any."),
        Column("external_service", T.STRING, "External service name associated with the group, if any."),
        Column("security_group_rules", T.JSON, "Rules associated with the security group."),
    ]


class NetworkSubnetTable(_NeutronTable):
    name = "rackspace_network_subnet"
    description = "Rackspace Cloud Networks subnets."
    resource = "subnets"
    collection = "subnets"
    columns = [
        Column("id", T.STRING, "The unique identifier of the subnet."),
        Column("name", T.STRING, "The name of the subnet."),
        Column("enable_dhcp", T.BOOL, "Whether DHCP is enabled on the subnet.", keep_zero=True),
        Column("network_id", T.STRING, "The network the subnet belongs to."),
        Column("tenant_id", T.STRING, "The tenant that owns the subnet."),
        Column("dns_nameservers", T.JSON, "DNS nameservers associated with the subnet."),
        Column("allocation_pools", T.JSON, "IP allocation pools for the subnet."),
        Column("host_routes", T.JSON, "Host routes associated with the subnet."),
        Column("ip_version", T.INT, "IP version used by the subnet, 4 or 6."),
        Column("gateway_ip", T.STRING, "The IP address of the subnet gateway."),
        Column("cidr", T.STRING, "The CIDR of the subnet."),
    ]
