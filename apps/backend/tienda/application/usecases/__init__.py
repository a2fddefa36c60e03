"""
Use cases grouped by feature:
  - auth: registro, login, perfil, contraseñas y administración de usuarios
  - catalog: productos
  - site_settings: configuración del sitio
  - ledger: transacciones (webhook, back-office, mis pedidos)
  - payments: sesión de pago
  - orders: pedidos de fulfillment
"""
