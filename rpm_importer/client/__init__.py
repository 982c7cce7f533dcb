from rpm_importer.client.base import BaseClient
from rpm_importer.client.auth import TokenSupplier
from rpm_importer.client.orch import OrchClient
from rpm_importer.client.reqour import ReqourClient
from rpm_importer.client.central import latest_rpm_builder_plugin_version

__all__ = [
    "BaseClient", "TokenSupplier", "OrchClient", "ReqourClient",
    "latest_rpm_builder_plugin_version",
]
