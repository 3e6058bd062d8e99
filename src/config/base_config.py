"""
Configuration settings for the CSI controller plugin.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# CSI Server Configuration
CSI_ENDPOINT = os.getenv('CSI_ENDPOINT', 'unix:///csi/csi.sock')
CSI_DRIVER_NAME = os.getenv('CSI_DRIVER_NAME', 'csi-sdsplugin')
CSI_DRIVER_VERSION = os.getenv('CSI_DRIVER_VERSION', 'v1.0.0')
MAX_WORKERS = int(os.getenv('MAX_WORKERS', '10'))
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

# Orchestrator Configuration
SDS_BACKEND = os.getenv('SDS_BACKEND', 'rest')  # 'rest' or 'memory'
SDS_ENDPOINT = os.getenv('SDS_ENDPOINT', 'http://127.0.0.1:50040')
SDS_API_VERSION = os.getenv('SDS_API_VERSION', 'v1beta')
SDS_TENANT_ID = os.getenv('SDS_TENANT_ID', 'adminTenantId')
SDS_AUTH_TOKEN = os.getenv('SDS_AUTH_TOKEN', None)
SDS_REQUEST_TIMEOUT = float(os.getenv('SDS_REQUEST_TIMEOUT', '30'))

# Provisioning Configuration
DEFAULT_AVAILABILITY_ZONE = os.getenv('DEFAULT_AVAILABILITY_ZONE', 'default')
DEFAULT_SECONDARY_AVAILABILITY_ZONE = os.getenv('DEFAULT_SECONDARY_AVAILABILITY_ZONE', 'secondary')

# Metrics Configuration
METRICS_PORT = int(os.getenv('METRICS_PORT', '0'))  # 0 disables the exporter
