"""
asaprov - Declarative Azure Stream Analytics job provisioning

Creates, updates and deletes Stream Analytics jobs together with their
functions, inputs, outputs and transformation through the Azure
management API.
"""

__version__ = "0.1.0"


__all__ = ["AsaprovConfig", "load_config", "get_asaprov_home"]

from .config import AsaprovConfig, load_config, get_asaprov_home
