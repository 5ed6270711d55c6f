"""Core del cliente: dominio, contratos, errores, configuración y servicios."""
