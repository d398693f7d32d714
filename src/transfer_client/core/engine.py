# src/transfer_client/core/engine.py
"""
Transfer engine adapter.

A TransferSession exposes the same small surface as a curl handle: set
options, perform once, read info and the last error, close. The default
engine performs HTTP(S) with requests, FTP(S) with ftplib and SFTP with
paramiko; this module only translates options, it implements no protocol.
"""
import ftplib
import importlib.util
import io
import socket
import sys
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote, unquote, urlsplit, urlunsplit

import paramiko
import requests
from requests.auth import AuthBase, HTTPBasicAuth, HTTPDigestAuth
from requests.structures import CaseInsensitiveDict

from .exceptions import (
    ConfigurationError,
    ErrorCode,
    FTPError,
    HTTPStatusError,
    ProtocolError,
    TransferError,
    classify_engine_exception,
)
from .logging import TransferLogger, get_logger
from .options import AuthType, Option, OptionKey, OptionSet
from ..utils.sanitizer import mask_headers, mask_url

logger = get_logger("transfer_client.engine")

_HTTP_VERSIONS = {10: "1.0", 11: "1.1", 20: "2"}

_BAD_PORT = "Port number was not a decimal number between 0 and 65535"

# Options each protocol handler reads; the rest are stored and ignored
_COMMON_OPTIONS = frozenset({
    Option.URL, Option.PORT, Option.VERBOSE, Option.FILE,
    Option.RETURNTRANSFER, Option.BINARYTRANSFER, Option.USERPWD,
    Option.TIMEOUT, Option.TIMEOUT_MS, Option.CONNECTTIMEOUT, Option.CONNECTTIMEOUT_MS,
})
_HTTP_OPTIONS = frozenset(Option) - {Option.SSH_KNOWNHOSTS}
_FTP_OPTIONS = _COMMON_OPTIONS
_SFTP_OPTIONS = _COMMON_OPTIONS | {Option.SSH_KNOWNHOSTS}


class TransferSession(ABC):
    """
    One transfer handle bound to a URL.

    Lifecycle: set options, ``perform()`` once, read ``get_info()`` /
    ``errno`` / ``error``, ``close()``. Not thread-safe.
    """

    def __init__(self, url: str):
        self.url = url
        self.options = OptionSet()
        self.errno = 0
        self.error = ""
        self.closed = False
        # TransferClient swaps in its own logger when it has a logging config
        self.logger: TransferLogger = logger
        self._info: Dict[str, Any] = {}

    # ==================== Options ====================

    def set_option(self, code: OptionKey, value: Any) -> None:
        self.options[code] = value

    def set_options(self, options: Mapping[OptionKey, Any]) -> None:
        self.options.update(options)

    @property
    def effective_url(self) -> str:
        """URL after the URL and PORT options are applied."""
        url = str(self.options.get(Option.URL) or self.url)
        port = self.options.get(Option.PORT)
        if not port:
            return url

        try:
            port = int(port)
            parts = urlsplit(url)
        except (TypeError, ValueError) as exc:
            raise ProtocolError(_BAD_PORT, mask_url(url), ErrorCode.URL_MALFORMAT) from exc
        if not 0 < port <= 65535:
            raise ProtocolError(_BAD_PORT, mask_url(url), ErrorCode.URL_MALFORMAT)

        userinfo, at, hostport = parts.netloc.rpartition("@")
        if hostport.startswith("["):
            host = hostport[:hostport.index("]") + 1]
        else:
            host = hostport.split(":")[0]
        return urlunsplit(parts._replace(netloc=f"{userinfo}{at}{host}:{port}"))

    @staticmethod
    def address(url: str, default_port: int) -> Tuple[str, int]:
        """
        Host and port of ``url``.

        Raises:
            ProtocolError: No host, or a port outside 1-65535 (URL_MALFORMAT)
        """
        try:
            parts = urlsplit(url)
            port = parts.port
        except ValueError as exc:
            raise ProtocolError(_BAD_PORT, mask_url(url), ErrorCode.URL_MALFORMAT) from exc
        if not parts.hostname:
            raise ProtocolError("No host part in the URL", mask_url(url), ErrorCode.URL_MALFORMAT)
        return parts.hostname, port or default_port

    def _seconds(self, ms_option: Option, s_option: Option) -> Optional[float]:
        """Timeout in seconds; 0 or unset means no limit."""
        if self.options.get(ms_option) is not None:
            value = float(self.options[ms_option]) / 1000
        elif self.options.get(s_option) is not None:
            value = float(self.options[s_option])
        else:
            return None
        return value or None

    def timeouts(self) -> Tuple[Optional[float], Optional[float]]:
        """(connect, total) timeouts in seconds."""
        return (
            self._seconds(Option.CONNECTTIMEOUT_MS, Option.CONNECTTIMEOUT),
            self._seconds(Option.TIMEOUT_MS, Option.TIMEOUT),
        )

    def credentials(self, url: str) -> Tuple[str, str]:
        """Login from the URL userinfo, else USERPWD, else anonymous."""
        parts = urlsplit(url)
        if parts.username:
            return unquote(parts.username), unquote(parts.password or "")
        userpwd = self.options.get(Option.USERPWD)
        if userpwd:
            username, _, password = str(userpwd).partition(":")
            return username, password
        return "anonymous", ""

    def _log_ignored(self, handled: frozenset, url: str) -> None:
        ignored = sorted(option.name for option in self.options if option not in handled)
        if ignored:
            self.logger.debug("Options ignored by this protocol", url=url, options=ignored)

    # ==================== Perform ====================

    def perform(self) -> bytes:
        """
        Run the transfer once.

        Returns:
            Response body (empty when RETURNTRANSFER is off)

        Raises:
            TransferError: Engine-reported failure; ``errno`` and ``error``
                are set to its code and message
            ConfigurationError: The session was already closed
        """
        if self.closed:
            raise ConfigurationError("Transfer session is closed")

        self.errno, self.error = 0, ""
        self._info = {
            "url": mask_url(self.url),
            "effective_url": mask_url(self.url),
            "http_code": 0,
            "content_type": None,
            "total_time": 0.0,
            "redirect_count": 0,
            "size_download": 0,
        }

        started = time.monotonic()
        try:
            url = self.effective_url
            self._info["url"] = self._info["effective_url"] = mask_url(url)
            body = self._transfer(url)
            return self._deliver(body)
        except TransferError as exc:
            self.errno, self.error = exc.code, exc.message
            raise
        finally:
            self._info["total_time"] = round(time.monotonic() - started, 6)

    @abstractmethod
    def _transfer(self, url: str) -> bytes:
        """Perform the transfer and return the raw body."""

    def _deliver(self, body: bytes) -> bytes:
        """Honour RETURNTRANSFER: return the body or write it to FILE/stdout."""
        if self.options.get(Option.RETURNTRANSFER, True):
            return body

        target = self.options.get(Option.FILE)
        if target is None:
            target = getattr(sys.stdout, "buffer", sys.stdout)
        try:
            target.write(body)
        except TypeError:
            # text stream
            target.write(body.decode("utf-8", errors="replace"))
        except OSError as exc:
            raise TransferError(str(exc), mask_url(self.url), ErrorCode.WRITE_ERROR) from exc
        return b""

    def get_info(self) -> Dict[str, Any]:
        """Metadata of the last perform()."""
        return dict(self._info)

    # ==================== Lifecycle ====================

    def close(self) -> None:
        """Release the handle. Idempotent."""
        if self.closed:
            return
        self.closed = True
        self._close()

    def _close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class RequestsTransferSession(TransferSession):
    """
    Session of the default engine. Dispatches on the URL scheme:

    - ``http``, ``https``: requests
    - ``ftp``, ``ftps``: ftplib
    - ``sftp``: paramiko
    """

    _handlers = {
        "http": "_transfer_http",
        "https": "_transfer_http",
        "ftp": "_transfer_ftp",
        "ftps": "_transfer_ftp",
        "sftp": "_transfer_sftp",
    }

    def __init__(self, url: str, session_factory: Callable[[], requests.Session] = requests.Session):
        super().__init__(url)
        self._session_factory = session_factory
        self._http: Optional[requests.Session] = None

    def _transfer(self, url: str) -> bytes:
        try:
            scheme = urlsplit(url).scheme.lower()
        except ValueError as exc:
            raise ProtocolError(str(exc), mask_url(url), ErrorCode.URL_MALFORMAT) from exc
        if not scheme:
            raise ProtocolError("URL using bad/illegal format or missing URL",
                                mask_url(url), ErrorCode.URL_MALFORMAT)

        handler = self._handlers.get(scheme)
        if handler is None:
            raise ProtocolError(f'Protocol "{scheme}" not supported', mask_url(url))
        return getattr(self, handler)(url)

    def _close(self) -> None:
        if self._http is not None:
            self._http.close()
            self._http = None

    # ==================== HTTP ====================

    def http_method(self) -> str:
        custom = self.options.get(Option.CUSTOMREQUEST)
        if custom:
            return str(custom).upper()
        if self.options.get(Option.NOBODY):
            return "HEAD"
        if self.options.get(Option.HTTPGET):
            return "GET"
        if self.options.get(Option.POST) or self.options.get(Option.POSTFIELDS) is not None:
            return "POST"
        return "GET"

    def http_headers(self) -> CaseInsensitiveDict:
        """
        Headers from USERAGENT/REFERER/COOKIE/ENCODING and the HTTPHEADER lines.

        Header line rules:
            ``Name: value``  sets the header; a repeated name is joined with ``, ``
            ``Name:``        removes a header the engine would send
            ``Name;``        sends the header with an empty value
        """
        headers = CaseInsensitiveDict()
        for option, name in ((Option.USERAGENT, "User-Agent"),
                             (Option.REFERER, "Referer"),
                             (Option.COOKIE, "Cookie")):
            value = self.options.get(option)
            if value:
                headers[name] = str(value)

        encoding = self.options.get(Option.ENCODING)
        if encoding is not None:
            headers["Accept-Encoding"] = encoding or "gzip, deflate"

        lines = self.options.get(Option.HTTPHEADER) or ()
        if isinstance(lines, str):
            lines = [lines]

        seen = set()
        for line in lines:
            line = str(line)
            name, sep, value = line.partition(":")
            name, value = name.strip(), value.strip()

            if not sep:
                if line.rstrip().endswith(";"):
                    headers[line.rstrip()[:-1].strip()] = ""
                else:
                    self.logger.debug("Ignoring malformed header line", header=line)
                continue

            if not value:
                headers[name] = None
            elif name.lower() in seen and headers.get(name):
                headers[name] = f"{headers[name]}, {value}"
            else:
                headers[name] = value
            seen.add(name.lower())

        if isinstance(self.options.get(Option.POSTFIELDS), str) and "Content-Type" not in headers:
            headers["Content-Type"] = "application/x-www-form-urlencoded"

        return headers

    def http_timeout(self) -> Union[None, float, Tuple[Optional[float], Optional[float]]]:
        connect, total = self.timeouts()
        if connect is None:
            return total
        return (connect, total)

    def http_auth(self) -> Optional[AuthBase]:
        userpwd = self.options.get(Option.USERPWD)
        if not userpwd:
            return None

        username, _, password = str(userpwd).partition(":")
        auth_type = AuthType(self.options.get(Option.HTTPAUTH, AuthType.BASIC))

        # requests cannot negotiate; Basic wins whenever it is allowed
        if auth_type & AuthType.DIGEST and not auth_type & AuthType.BASIC:
            return HTTPDigestAuth(username, password)
        return HTTPBasicAuth(username, password)

    def http_proxies(self) -> Optional[Dict[str, str]]:
        proxy = self.options.get(Option.PROXY)
        if not proxy:
            return None

        proxy = str(proxy)
        if "://" not in proxy:
            proxy = "http://" + proxy

        userpwd = self.options.get(Option.PROXYUSERPWD)
        if userpwd:
            username, _, password = str(userpwd).partition(":")
            auth = quote(username, safe="")
            if password:
                auth += ":" + quote(password, safe="")
            scheme, rest = proxy.split("://", 1)
            proxy = f"{scheme}://{auth}@{rest}"

        return {"http": proxy, "https": proxy}

    def http_verify(self) -> Union[bool, str]:
        if not self.options.get(Option.SSL_VERIFYPEER, True):
            return False
        if self.options.get(Option.SSL_VERIFYHOST) == 0:
            self.logger.debug("SSL_VERIFYHOST=0 has no effect while peer verification is on")
        cainfo = self.options.get(Option.CAINFO)
        return str(cainfo) if cainfo else True

    def http_cert(self) -> Union[None, str, Tuple[str, str]]:
        cert = self.options.get(Option.SSLCERT)
        if not cert:
            return None
        key = self.options.get(Option.SSLKEY)
        return (str(cert), str(key)) if key else str(cert)

    def http_request_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``requests.Session.request``."""
        kwargs: Dict[str, Any] = {
            "headers": self.http_headers(),
            "timeout": self.http_timeout(),
            "allow_redirects": bool(self.options.get(Option.FOLLOWLOCATION, False)),
            "verify": self.http_verify(),
        }

        body = self.options.get(Option.POSTFIELDS)
        if body is not None:
            kwargs["data"] = body

        for key, value in (("auth", self.http_auth()),
                           ("proxies", self.http_proxies()),
                           ("cert", self.http_cert())):
            if value is not None:
                kwargs[key] = value

        return kwargs

    @staticmethod
    def _raw_header_block(response: requests.Response) -> bytes:
        version = _HTTP_VERSIONS.get(getattr(response.raw, "version", None), "1.1")
        lines = [f"HTTP/{version} {response.status_code} {response.reason or ''}".rstrip()]
        lines.extend(f"{name}: {value}" for name, value in response.headers.items())
        return ("\r\n".join(lines) + "\r\n\r\n").encode("latin-1", errors="replace")

    def _transfer_http(self, url: str) -> bytes:
        method = self.http_method()
        kwargs = self.http_request_kwargs()
        safe_url = mask_url(url)
        verbose = bool(self.options.get(Option.VERBOSE))
        self._log_ignored(_HTTP_OPTIONS, safe_url)

        if self._http is None:
            self._http = self._session_factory()

        max_redirects = self.options.get(Option.MAXREDIRS)
        if max_redirects is not None and int(max_redirects) >= 0:
            self._http.max_redirects = int(max_redirects)

        if verbose:
            self.logger.debug(
                "> request",
                method=method,
                url=safe_url,
                request_headers=mask_headers({k: v for k, v in kwargs["headers"].items() if v is not None}),
            )

        try:
            response = self._http.request(method, url, **kwargs)
            content = response.content
        except requests.exceptions.RequestException as exc:
            raise classify_engine_exception(exc, safe_url) from exc

        self._info.update({
            "effective_url": mask_url(response.url or url),
            "http_code": response.status_code,
            "content_type": response.headers.get("Content-Type"),
            "redirect_count": len(response.history),
            "size_download": len(content),
            "request_method": method,
            "response_headers": dict(response.headers),
        })

        if verbose:
            self.logger.debug(
                "< response",
                url=safe_url,
                status_code=response.status_code,
                response_headers=mask_headers(response.headers),
                size=len(content),
            )

        if self.options.get(Option.FAILONERROR) and response.status_code >= 400:
            raise HTTPStatusError(response.status_code, safe_url, response.reason or "")

        if self.options.get(Option.HEADER):
            content = self._raw_header_block(response) + content

        return content

    # ==================== FTP ====================

    @staticmethod
    def _quit_ftp(ftp: ftplib.FTP) -> None:
        if ftp.sock is None:
            ftp.close()
            return
        try:
            ftp.quit()
        except ftplib.all_errors:
            ftp.close()

    def _transfer_ftp(self, url: str) -> bytes:
        host, port = self.address(url, 21)
        parts = urlsplit(url)
        safe_url = mask_url(url)

        self._log_ignored(_FTP_OPTIONS, safe_url)
        username, password = self.credentials(url)
        connect_timeout, total = self.timeouts()
        use_tls = parts.scheme.lower() == "ftps"
        # path is relative to the login directory
        path = unquote(parts.path)[1:]

        ftp = ftplib.FTP_TLS() if use_tls else ftplib.FTP()
        try:
            ftp.connect(host, port, timeout=connect_timeout or total)
            ftp.login(username, password)
            if use_tls:
                ftp.prot_p()

            if self.options.get(Option.VERBOSE):
                self.logger.debug("< ftp welcome", url=safe_url, reply=ftp.getwelcome())

            if not path or path.endswith("/"):
                lines: List[str] = []
                reply = ftp.retrlines(f"LIST {path}".rstrip(), lines.append)
                content = "".join(f"{line}\r\n" for line in lines).encode(ftp.encoding)
            else:
                buffer = io.BytesIO()
                reply = ftp.retrbinary(f"RETR {path}", buffer.write)
                content = buffer.getvalue()
        except ftplib.all_errors as exc:
            raise classify_engine_exception(exc, safe_url) from exc
        finally:
            self._quit_ftp(ftp)

        reply = str(reply or "")
        self._info.update({
            "http_code": int(reply[:3]) if reply[:3].isdigit() else 0,
            "size_download": len(content),
        })
        return content

    # ==================== SFTP ====================

    def _known_host_key(self, host: str, port: int, safe_url: str) -> Optional[paramiko.PKey]:
        known_hosts = self.options.get(Option.SSH_KNOWNHOSTS)
        if not known_hosts:
            self.logger.debug("SSH host key is not verified (no SSH_KNOWNHOSTS)", url=safe_url)
            return None

        entry = paramiko.HostKeys(str(known_hosts)).lookup(host if port == 22 else f"[{host}]:{port}")
        if not entry:
            raise TransferError(
                f"Host key for {host} not found in {known_hosts}",
                safe_url,
                ErrorCode.PEER_FAILED_VERIFICATION,
            )
        return next(iter(entry.values()))

    def _transfer_sftp(self, url: str) -> bytes:
        host, port = self.address(url, 22)
        safe_url = mask_url(url)

        self._log_ignored(_SFTP_OPTIONS, safe_url)
        username, password = self.credentials(url)
        connect_timeout, total = self.timeouts()
        path = unquote(urlsplit(url).path)
        if path.startswith("/~/"):
            path = path[3:]

        sock = None
        transport = None
        try:
            sock = socket.create_connection((host, port), timeout=connect_timeout or total)
            transport = paramiko.Transport(sock)
            if total:
                transport.banner_timeout = total
            transport.connect(
                hostkey=self._known_host_key(host, port, safe_url),
                username=username,
                password=password or None,
            )
            sftp = paramiko.SFTPClient.from_transport(transport)
            buffer = io.BytesIO()
            sftp.getfo(path, buffer)
            content = buffer.getvalue()
        except paramiko.AuthenticationException as exc:
            raise FTPError(str(exc) or "Authentication failed", safe_url, ErrorCode.LOGIN_DENIED) from exc
        except paramiko.BadHostKeyException as exc:
            raise TransferError(str(exc), safe_url, ErrorCode.PEER_FAILED_VERIFICATION) from exc
        except paramiko.SSHException as exc:
            raise TransferError(str(exc) or type(exc).__name__, safe_url, ErrorCode.SSH) from exc
        except (OSError, EOFError) as exc:
            raise classify_engine_exception(exc, safe_url) from exc
        finally:
            if transport is not None:
                transport.close()
            elif sock is not None:
                sock.close()

        self._info["size_download"] = len(content)
        return content


class TransferEngine(ABC):
    """Factory of transfer sessions."""

    name: str = "transfer engine"

    @abstractmethod
    def is_available(self) -> bool:
        """Whether transfers can be performed on this host."""

    @abstractmethod
    def open_session(self, url: str) -> TransferSession:
        """Create a session bound to ``url``."""


class RequestsTransferEngine(TransferEngine):
    """
    Default engine (requests + ftplib + paramiko).

    Args:
        session_factory: Creates the requests.Session used by one transfer
    """

    name = "requests"

    def __init__(self, session_factory: Callable[[], requests.Session] = requests.Session):
        self._session_factory = session_factory

    def is_available(self) -> bool:
        return importlib.util.find_spec("requests") is not None

    def open_session(self, url: str) -> RequestsTransferSession:
        return RequestsTransferSession(url, self._session_factory)
