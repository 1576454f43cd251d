"""Constantes HTTP pour éviter les valeurs magiques dans le code.

Codes de statut utilisés par les routes et les gestionnaires d'erreurs.
"""

HTTP_OK = 200
HTTP_CREATED = 201
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_NOT_FOUND = 404
HTTP_CONFLICT = 409
HTTP_INTERNAL_SERVER_ERROR = 500
HTTP_BAD_GATEWAY = 502
HTTP_SERVICE_UNAVAILABLE = 503
HTTP_GATEWAY_TIMEOUT = 504

BEARER_PREFIX = "bearer "
LOOPBACK_IP = "127.0.0.1"
