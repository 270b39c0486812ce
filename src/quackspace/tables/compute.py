"""Tables backed by the Cloud Servers (Nova) compute API: servers, flavors, keypairs, limits."""
from ..clients import ServiceKind
from ..fetch import fetch_one
from ..normalize import Column, ColumnType as T
from ..pagination import LinkPager, SinglePager, iter_pages
from .base import BaseTable


class ComputeTable(BaseTable):
    name = "rackspace_compute"
    description = "Rackspace Cloud Servers (Nova)."
    get_key = "id"
    columns = [
        Column("id", T.STRING, "The ID of the server."),
        Column("tenant_id", T.STRING, "Tenant owning the server."),
        Column("user_id", T.STRING, "User account owning the tenant."),
        Column("name", T.STRING, "Human-readable name of the server."),
        Column("updated", T.TIMESTAMP, "Last updated timestamp."),
        Column("created", T.TIMESTAMP, "Server creation timestamp."),
        Column("host_id", T.STRING, "The host where the server is located in the cloud.", field="hostId"),
        Column("status", T.STRING, "Operational status of the server, such as BUILD or ACTIVE."),
        Column("progress", T.INT, "Build progress, from 0 to 100.", keep_zero=True),
        Column("accessIPv4", T.STRING, "IPv4 address of the server."),
        Column("accessIPv6", T.STRING, "IPv6 address of the server."),
        Column("image", T.JSON, "The OS image used to deploy the server."),
        Column("flavor", T.JSON, "Hardware configuration of the server."),
        Column("addresses", T.JSON, "IP addresses assigned to the server, by network."),
        Column("metadata", T.JSON, "User-specified key-value pairs attached to the server."),
        Column("links", T.JSON, "HTTP references to the server itself."),
        Column("key_name", T.STRING, "Public key name used for SSH login."),
        Column("admin_pass", T.STRING, "Administrative password.", field="adminPass"),
        Column("security_groups", T.JSON, "Security groups applied to the server."),
        Column("attached_volumes", T.JSON, "Volume attachments for the server.",
               field="os-extended-volumes:volumes_attached"),

        Column("vm_state", T.STRING, "Virtual machine state, such as 'active'.", field="OS-EXT-STS:vm_state"),
        Column("disk_config", T.STRING, "Disk configuration, AUTO or MANUAL.", field="OS-DCF:diskConfig"),
        Column("power_state", T.INT, "Power state of the server; 0 means no state.",
               field="OS-EXT-STS:power_state", keep_zero=True),
        Column("task_state", T.STRING, "Task state of the server.", field="OS-EXT-STS:task_state"),
        Column("fault", T.JSON, "Information about a server failure."),
        Column("tags", T.JSON, "Tags attached to the server."),
        Column("server_groups", T.JSON, "Server groups the server belongs to."),
        Column("availability_zone", T.STRING, "Availability zone of the server.", field="OS-EXT-AZ:availability_zone"),

        Column("host", T.STRING, "Host or hypervisor running the instance.", field="OS-EXT-SRV-ATTR:host"),
        Column("instance_name", T.STRING, "Name of the instance.", field="OS-EXT-SRV-ATTR:instance_name"),
        Column("hypervisor_hostname", T.STRING, "Hostname of the hypervisor.",
               field="OS-EXT-SRV-ATTR:hypervisor_hostname"),
        Column("reservation_id", T.STRING, "Reservation ID of the instance.", field="OS-EXT-SRV-ATTR:reservation_id"),
        Column("launch_index", T.INT, "Launch index of the instance.",
               field="OS-EXT-SRV-ATTR:launch_index", keep_zero=True),
        Column("ramdisk_id", T.STRING, "RAM disk image of the instance.", field="OS-EXT-SRV-ATTR:ramdisk_id"),
        Column("kernel_id", T.STRING, "Kernel image of the instance.", field="OS-EXT-SRV-ATTR:kernel_id"),
        Column("hostname", T.STRING, "Hostname of the instance.", field="OS-EXT-SRV-ATTR:hostname"),
        Column("root_device_name", T.STRING, "Root device of the instance.", field="OS-EXT-SRV-ATTR:root_device_name"),
        Column("userdata", T.STRING, "User data of the instance.", field="OS-EXT-SRV-ATTR:user_data"),

        Column("launched_at", T.TIMESTAMP, "When the instance was launched.", field="OS-SRV-USG:launched_at"),
        Column("terminated_at", T.TIMESTAMP, "When the instance was terminated.", field="OS-SRV-USG:terminated_at"),

        Column("public_ip_zone_id", T.STRING, "Rackspace-specific public IP zone ID.",
               field="RAX-PUBLIC-IP-ZONE-ID:publicIPZoneId"),
    ]

    def list_pages(self, conn, quals, ctx):
        client = conn.catalog_client(ServiceKind.COMPUTE, ctx)
        yield from iter_pages(LinkPager(client, "servers/detail", "servers"), ctx)

    def get_item(self, conn, key, ctx):
        client = conn.catalog_client(ServiceKind.COMPUTE, ctx)
        return fetch_one(client, f"servers/{key}", "server", ctx)


class ComputeFlavorTable(BaseTable):
    name = "rackspace_compute_flavor"
    description = "Rackspace Cloud Servers flavors."
    get_key = "id"
    columns = [
        Column("id", T.STRING, "The unique identifier of the flavor."),
        Column("name", T.STRING, "The name of the flavor."),
        Column("ram", T.INT, "The amount of RAM in MB.", keep_zero=True),
        Column("vcpus", T.INT, "The number of virtual CPUs.", keep_zero=True),
        Column("disk", T.INT, "The disk size in GB.", keep_zero=True),
        # Nova reports "no swap" as an empty string
        Column("swap", T.INT, "The amount of swap space in MB."),
        Column("rxtx_factor", T.DOUBLE, "The RX/TX factor used for bandwidth calculations."),
        Column("is_public", T.BOOL, "Whether the flavor is public.", field="os-flavor-access:is_public", keep_zero=True),
        Column("ephemeral", T.INT, "The amount of ephemeral storage in GB.",
               field="OS-FLV-EXT-DATA:ephemeral", keep_zero=True),
        Column("extra_specs", T.JSON, "The extra specifications of the flavor.",
               field="OS-FLV-WITH-EXT-SPECS:extra_specs"),
        Column("description", T.STRING, "The description of the flavor."),
    ]

    def list_pages(self, conn, quals, ctx):
        client = conn.catalog_client(ServiceKind.COMPUTE, ctx)
        yield from iter_pages(LinkPager(client, "flavors/detail", "flavors"), ctx)

    def get_item(self, conn, key, ctx):
        if not key:
            return None
        client = conn.catalog_client(ServiceKind.COMPUTE, ctx)
        return fetch_one(client, f"flavors/{key}", "flavor", ctx)


class ComputeKeypairTable(BaseTable):
    name = "rackspace_compute_keypair"
    description = "Rackspace Cloud Servers SSH keypairs."
    get_key = "name"
    columns = [
        Column("name", T.STRING, "The name of the keypair."),
        Column("public_key", T.STRING, "The public key of the keypair."),
        Column("fingerprint", T.STRING, "The fingerprint of the keypair."),
        Column("user_id", T.STRING, "The user ID associated with the keypair."),
        Column("type", T.STRING, "The type of keypair, such as ssh or x509."),
        Column("created_at", T.TIMESTAMP, "When the keypair was created."),
        Column("updated_at", T.TIMESTAMP, "When the keypair was last updated."),
        Column("deleted_at", T.TIMESTAMP, "When the keypair was deleted."),
        Column("deleted", T.BOOL, "Whether the keypair is deleted.", keep_zero=True),
    ]

    def list_pages(self, conn, quals, ctx):
        client = conn.catalog_client(ServiceKind.COMPUTE, ctx)
        pager = SinglePager(client, "os-keypairs", "keypairs", item_key="keypair")
        yield from iter_pages(pager, ctx)

    def get_item(self, conn, key, ctx):
        client = conn.catalog_client(ServiceKind.COMPUTE, ctx)
        return fetch_one(client, f"os-keypairs/{key}", "keypair", ctx)


_LIMITS = [
    ("max_total_cores", "maxTotalCores", "The maximum number of cores available to a tenant."),
    ("max_image_meta", "maxImageMeta", "The maximum amount of image metadata available to a tenant."),
    ("max_server_meta", "maxServerMeta", "The maximum amount of server metadata available to a tenant."),
    ("max_personality", "maxPersonality", "The maximum number of personality files available to a tenant."),
    ("max_personality_size", "maxPersonalitySize", "The maximum size of each personality file in bytes."),
    ("max_total_keypairs", "maxTotalKeypairs", "The maximum number of keypairs available to a tenant."),
    ("max_security_groups", "maxSecurityGroups", "The maximum number of security groups available to a tenant."),
    ("max_security_group_rules", "maxSecurityGroupRules",
     "The maximum number of security group rules available to a tenant."),
    ("max_server_groups", "maxServerGroups", "The maximum number of server groups available to a tenant."),
    ("max_server_group_members", "maxServerGroupMembers", "The maximum number of members in each server group."),
    ("max_total_floating_ips", "maxTotalFloatingIps", "The maximum number of floating IPs available to a tenant."),
    ("max_total_instances", "maxTotalInstances", "The maximum number of instances available to a tenant."),
    ("max_total_ram_size", "maxTotalRAMSize", "The total amount of RAM available to a tenant in MB."),
    ("total_cores_used", "totalCoresUsed", "The total number of cores currently in use."),
    ("total_instances_used", "totalInstancesUsed", "The total number of instances currently in use."),
    ("total_floating_ips_used", "totalFloatingIpsUsed", "The total number of floating IPs currently in use."),
    ("total_ram_used", "totalRAMUsed", "The total amount of RAM currently in use in MB."),
    ("total_security_groups_used", "totalSecurityGroupsUsed", "The total number of security groups currently in use."),
    ("total_server_groups_used", "totalServerGroupsUsed", "The total number of server groups currently in use."),
]


class ComputeLimitTable(BaseTable):
    name = "rackspace_compute_limit"
    description = "Rackspace Cloud Servers absolute limits and usage for the tenant."
    # a quota or usage of 0 is a real value, never "unknown"
    columns = [Column(name, T.INT, desc, field=f"absolute.{field}", keep_zero=True) for name, field, desc in _LIMITS]

    def list_pages(self, conn, quals, ctx):
        client = conn.catalog_client(ServiceKind.COMPUTE, ctx)
        limits = fetch_one(client, "limits", "limits", ctx, operation="get compute limits")
        yield [limits]
