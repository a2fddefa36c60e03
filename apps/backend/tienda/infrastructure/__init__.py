"""Capa de infraestructura: Postgres, memoria y proveedores externos."""
