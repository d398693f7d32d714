"""
Иерархия исключений Transfer Client.

Классификация:
- ConfigurationError - ошибка на стороне вызывающего кода,
  выбрасывается сразу в месте вызова
- TransferError - ошибка, о которой сообщил transfer engine; несёт
  числовой код (нумерация libcurl) и сообщение. Из execute() не
  выбрасывается, а возвращается внутри TransferResult.
"""

import ftplib
import socket
from enum import IntEnum
from typing import Optional

import requests


class ErrorCode(IntEnum):
    """Коды ошибок transfer engine (совпадают с CURLE_* из libcurl)."""

    OK = 0
    UNSUPPORTED_PROTOCOL = 1
    FAILED_INIT = 2
    URL_MALFORMAT = 3
    COULDNT_RESOLVE_PROXY = 5
    COULDNT_RESOLVE_HOST = 6
    COULDNT_CONNECT = 7
    FTP_WEIRD_SERVER_REPLY = 8
    REMOTE_ACCESS_DENIED = 9
    HTTP_RETURNED_ERROR = 22
    WRITE_ERROR = 23
    OPERATION_TIMEDOUT = 28
    SSL_CONNECT_ERROR = 35
    TOO_MANY_REDIRECTS = 47
    GOT_NOTHING = 52
    RECV_ERROR = 56
    PEER_FAILED_VERIFICATION = 60
    LOGIN_DENIED = 67
    REMOTE_FILE_NOT_FOUND = 78
    SSH = 79


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TransferClientException(Exception):
    """Базовое исключение Transfer Client."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# КОНФИГУРАЦИЯ (raise сразу)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConfigurationError(TransferClientException):
    """Ошибка конфигурации."""


class EngineUnavailableError(ConfigurationError):
    """Transfer engine недоступен на этом хосте."""

    def __init__(self, engine: str = "transfer engine"):
        self.engine = engine
        super().__init__(
            f"{engine} is not available on this host; "
            f"install 'requests' to enable transfers"
        )


class UnknownOptionError(ConfigurationError):
    """
    Неизвестное имя или код опции.

    Args:
        option: То, что передал вызывающий код
    """

    def __init__(self, option: object):
        self.option = option
        super().__init__(f"Unknown transfer option: {option!r}")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОШИБКИ ПЕРЕДАЧИ (code + message от engine)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TransferError(TransferClientException):
    """
    Ошибка передачи, о которой сообщил engine.

    Args:
        message: Сообщение engine (то, что попадает в error_string)
        url: URL передачи (уже без credentials)
        code: Код ошибки; по умолчанию default_code класса

    Attributes:
        code: Числовой код (ErrorCode)
        message: Сообщение без URL
        url: URL
    """

    default_code: ErrorCode = ErrorCode.FAILED_INIT

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        code: Optional[int] = None
    ):
        self.code = int(code if code is not None else self.default_code)
        self.url = url

        full_message = message
        if url:
            full_message += f" (url: {url})"

        super().__init__(full_message)
        self.message = message


class TimeoutError(TransferError):
    """Превышен таймаут передачи."""
    default_code = ErrorCode.OPERATION_TIMEDOUT


class ConnectionError(TransferError):
    """
    Ошибка подключения.

    Примеры:
    - Connection refused
    - Connection reset
    - Network unreachable
    """
    default_code = ErrorCode.COULDNT_CONNECT


class DNSError(ConnectionError):
    """DNS resolution failed."""
    default_code = ErrorCode.COULDNT_RESOLVE_HOST


class ProxyError(ConnectionError):
    """Прокси недоступен или отверг соединение."""
    default_code = ErrorCode.COULDNT_RESOLVE_PROXY


class SSLError(TransferError):
    """TLS handshake или проверка сертификата не прошли."""
    default_code = ErrorCode.SSL_CONNECT_ERROR


class RedirectError(TransferError):
    """Превышен лимит редиректов."""
    default_code = ErrorCode.TOO_MANY_REDIRECTS


class ProtocolError(TransferError):
    """Неподдерживаемая схема или битый URL."""
    default_code = ErrorCode.UNSUPPORTED_PROTOCOL


class HTTPStatusError(TransferError):
    """
    Сервер вернул статус >= 400 при включённом FAILONERROR.

    Args:
        status_code: HTTP статус
        url: URL
        reason: Reason phrase из ответа
    """

    default_code = ErrorCode.HTTP_RETURNED_ERROR

    def __init__(self, status_code: int, url: Optional[str] = None, reason: str = ""):
        self.status_code = status_code

        message = f"The requested URL returned error: {status_code}"
        if reason:
            message += f" {reason}"

        super().__init__(message, url)


class FTPError(TransferError):
    """Ошибка FTP/SFTP сервера (логин, права, отсутствующий файл)."""
    default_code = ErrorCode.REMOTE_ACCESS_DENIED


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

_DNS_FAILURE_MARKERS = (
    "NameResolutionError",
    "Name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "Temporary failure in name resolution",
    "Failed to resolve",
)


def _classify_ftp_reply(exc: ftplib.Error, url: Optional[str]) -> FTPError:
    """Разобрать ответ FTP сервера по коду ответа."""
    reply = str(exc)
    if isinstance(exc, ftplib.error_perm):
        if reply.startswith("530"):
            return FTPError(reply, url, ErrorCode.LOGIN_DENIED)
        if reply.startswith("550"):
            return FTPError(reply, url, ErrorCode.REMOTE_FILE_NOT_FOUND)
        return FTPError(reply, url, ErrorCode.REMOTE_ACCESS_DENIED)
    if isinstance(exc, ftplib.error_temp):
        return FTPError(reply, url, ErrorCode.REMOTE_ACCESS_DENIED)
    return FTPError(reply, url, ErrorCode.FTP_WEIRD_SERVER_REPLY)


def classify_engine_exception(
    exc: BaseException,
    url: Optional[str] = None
) -> TransferError:
    """
    Конвертировать исключения requests / ftplib / socket в TransferError.

    Args:
        exc: Исключение из engine
        url: URL передачи (без credentials)

    Returns:
        TransferError с кодом в нумерации libcurl

    Examples:
        >>> exc = requests.exceptions.ConnectTimeout()
        >>> err = classify_engine_exception(exc, "https://example.com")
        >>> assert isinstance(err, TimeoutError)
        >>> assert err.code == ErrorCode.OPERATION_TIMEDOUT
    """
    if isinstance(exc, TransferError):
        return exc

    message = str(exc) or type(exc).__name__

    # requests: порядок важен - SSLError, ProxyError и ConnectTimeout
    # наследуются от ConnectionError
    if isinstance(exc, requests.exceptions.SSLError):
        if "CERTIFICATE_VERIFY_FAILED" in message or "certificate verify failed" in message:
            return SSLError(message, url, ErrorCode.PEER_FAILED_VERIFICATION)
        return SSLError(message, url)

    if isinstance(exc, requests.exceptions.ProxyError):
        return ProxyError(message, url)

    if isinstance(exc, requests.exceptions.Timeout):
        return TimeoutError(message, url)

    if isinstance(exc, requests.exceptions.TooManyRedirects):
        return RedirectError(message, url)

    if isinstance(exc, requests.exceptions.InvalidSchema):
        return ProtocolError(message, url)

    if isinstance(exc, (requests.exceptions.MissingSchema, requests.exceptions.InvalidURL)):
        return ProtocolError(message, url, ErrorCode.URL_MALFORMAT)

    if isinstance(exc, requests.exceptions.ConnectionError):
        if any(marker in message for marker in _DNS_FAILURE_MARKERS):
            return DNSError(message, url)
        if "RemoteDisconnected" in message:
            return ConnectionError(message, url, ErrorCode.GOT_NOTHING)
        return ConnectionError(message, url)

    if isinstance(exc, (requests.exceptions.ChunkedEncodingError,
                        requests.exceptions.ContentDecodingError)):
        return TransferError(message, url, ErrorCode.RECV_ERROR)

    # RequestException наследуется от IOError, ловим до OSError
    if isinstance(exc, requests.exceptions.RequestException):
        return TransferError(message, url)

    # ftplib
    if isinstance(exc, ftplib.Error):
        return _classify_ftp_reply(exc, url)

    # socket / OS уровень (FTP, SFTP)
    if isinstance(exc, socket.gaierror):
        return DNSError(message, url)

    if isinstance(exc, socket.timeout):
        return TimeoutError(message, url)

    if isinstance(exc, FileNotFoundError):
        return FTPError(message, url, ErrorCode.REMOTE_FILE_NOT_FOUND)

    if isinstance(exc, PermissionError):
        return FTPError(message, url, ErrorCode.REMOTE_ACCESS_DENIED)

    if isinstance(exc, EOFError):
        return ConnectionError(message, url, ErrorCode.GOT_NOTHING)

    if isinstance(exc, OSError):
        return ConnectionError(message, url)

    # Неизвестная ошибка - оборачиваем с generic кодом
    return TransferError(message, url)
