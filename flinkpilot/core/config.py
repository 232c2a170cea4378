import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(Path(__file__).parent.parent.parent.absolute(), '.env'))

# Used when kubernetes.config.file is not set; falls back to in-cluster config when empty
KUBECONFIG_PATH = os.getenv('KUBECONFIG')

# Local directory holding flink-conf.yaml and the console logging files shipped to the pods
FLINK_CONF_DIR = os.getenv('FLINK_CONF_DIR')

LOG_LEVEL = os.getenv('FLINKPILOT_LOG_LEVEL', 'INFO')
