"""Servicios de monitoreo ambiental (temperatura, humedad, presión, luz).

Paquetes:
- monitoring: motor global de escalamiento (offline + anomalías)
- narrative: narrativa de una frase para el dispositivo seleccionado
- i18n: catálogo de mensajes EN/JP
- repository: fuentes de lecturas (colaborador externo)
- jobs.monitor: poller periódico + despacho de notificaciones
- api: endpoints HTTP
"""

__version__ = "0.3.0"
