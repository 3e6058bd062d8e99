"""
CSI Identity service.
"""
from src.config.base_config import CSI_DRIVER_NAME, CSI_DRIVER_VERSION
from .errors import handle_csi_errors
from .metrics import measure_rpc
from .proto import csi_pb2, csi_pb2_grpc


class IdentityService(csi_pb2_grpc.IdentityServicer):
    """Identity service reporting plugin info and readiness"""

    def __init__(self, name: str = CSI_DRIVER_NAME, vendor_version: str = CSI_DRIVER_VERSION):
        self.name = name
        self.vendor_version = vendor_version

    @measure_rpc
    @handle_csi_errors(csi_pb2.GetPluginInfoResponse)
    def GetPluginInfo(self, request, context):
        """Return plugin info"""
        return csi_pb2.GetPluginInfoResponse(name=self.name, vendor_version=self.vendor_version)

    @measure_rpc
    @handle_csi_errors(csi_pb2.GetPluginCapabilitiesResponse)
    def GetPluginCapabilities(self, request, context):
        """Return plugin capabilities"""
        cap = csi_pb2.PluginCapability(
            service=csi_pb2.PluginCapability.Service(
                type=csi_pb2.PluginCapability.Service.CONTROLLER_SERVICE
            )
        )
        return csi_pb2.GetPluginCapabilitiesResponse(capabilities=[cap])

    @measure_rpc
    @handle_csi_errors(csi_pb2.ProbeResponse)
    def Probe(self, request, context):
        """Health check"""
        return csi_pb2.ProbeResponse(ready=True)
