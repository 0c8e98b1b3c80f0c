"""Core: dominio, configuración, errores y servicios (sin CLI ni HTTP)."""
