# infrastructure/network/tls_probe.py
from __future__ import annotations
import logging
import socket
import ssl
from time import monotonic
from domain.models import ProbeResult

logger = logging.getLogger(__name__)

def _remaining(deadline: float) -> float:
    left = deadline - monotonic()
    if left <= 0:
        raise socket.timeout("timed out")
    return left

def _connect(host: str, port: int, deadline: float) -> socket.socket:
    """TCP a la primera dirección que responda; todas comparten el mismo plazo."""
    last_error: OSError | None = None
    for family, type_, proto, _, addr in socket.getaddrinfo(host, port, type=socket.SOCK_STREAM):
        sock = socket.socket(family, type_, proto)
        try:
            sock.settimeout(_remaining(deadline))
            sock.connect(addr)
            return sock
        except OSError as exc:
            sock.close()
            if isinstance(exc, socket.timeout):
                raise
            last_error = exc
    raise last_error or OSError(f"Sin direcciones para {host}")

def probe_tls(host: str, port: int, timeout: float = 5.0, context: ssl.SSLContext | None = None) -> ProbeResult:
    """
    Abre una conexión TLS, completa el handshake y la cierra en el acto.
    Conexión y handshake comparten un único plazo de `timeout` segundos.
    Nunca lanza: timeout -> ok=False/"Timeout", cualquier otro fallo -> ok=False con el mensaje.
    """
    ctx = context or ssl.create_default_context()
    deadline = monotonic() + timeout
    sock: socket.socket | None = None
    try:
        sock = _connect(host, port, deadline)
        sock.settimeout(_remaining(deadline))
        with ctx.wrap_socket(sock, server_hostname=host):
            pass
        return ProbeResult(ok=True)
    except (socket.timeout, TimeoutError):
        logger.warning("Ping TLS %s:%s sin respuesta en %ss", host, port, timeout)
        return ProbeResult(ok=False, error="Timeout")
    except (OSError, ssl.SSLError, ValueError) as exc:
        logger.warning("Ping TLS %s:%s falló: %s", host, port, exc)
        return ProbeResult(ok=False, error=str(exc) or exc.__class__.__name__)
    finally:
        # el socket se cierra siempre, también tras timeout
        if sock is not None:
            sock.close()
