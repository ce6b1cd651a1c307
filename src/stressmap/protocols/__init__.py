from .catalog import DEFAULT_PROTOCOLS, ProtocolCatalog, default_catalog

__all__ = ["DEFAULT_PROTOCOLS", "ProtocolCatalog", "default_catalog"]
