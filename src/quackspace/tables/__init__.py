"""
Registry of every table quackspace exposes.
"""
from typing import Dict

from .base import BaseTable
from .block_storage import SnapshotTable, VolumeTable
from .cloud_files import CloudFilesContainerTable, CloudFilesObjectTable
from .compute import ComputeFlavorTable, ComputeKeypairTable, ComputeLimitTable, ComputeTable
from .dns import DNSDomainTable
from .image import ImageTable
from .loadbalancer import LoadBalancerTable
from .network import NetworkPortTable, NetworkSecurityGroupTable, NetworkSubnetTable, NetworkTable
from .queue import MessageQueueTable

TABLE_REGISTRY: Dict[str, BaseTable] = {
    table.name: table
    for table in (
        ComputeTable(),
        ComputeFlavorTable(),
        ComputeKeypairTable(),
        ComputeLimitTable(),
        ImageTable(),
        VolumeTable(),
        SnapshotTable(),
        NetworkTable(),
        NetworkPortTable(),
        NetworkSecurityGroupTable(),
        NetworkSubnetTable(),
        LoadBalancerTable(),
        MessageQueueTable(),
        DNSDomainTable(),
        CloudFilesContainerTable(),
        CloudFilesObjectTable(),
    )
}

__all__ = ["BaseTable", "TABLE_REGISTRY"]
