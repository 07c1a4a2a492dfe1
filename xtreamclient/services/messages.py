"""
User-facing login failure messages per error kind.
"""
from xtreamclient.errors import ErrorKind

LOGIN_MESSAGES = {
    "en": {
        ErrorKind.INVALID_ADDRESS: "The server address is not valid. Please check it and try again.",
        ErrorKind.UNREACHABLE: "Could not connect to the server. Please check the server address and your internet connection.",
        ErrorKind.TIMEOUT: "The connection timed out. The server may not be responding or there may be a temporary network problem.",
        ErrorKind.INVALID_CREDENTIALS: "Incorrect username or password.",
        ErrorKind.SERVER_ERROR: "The server returned an error. Please try again later.",
        ErrorKind.UNAUTHENTICATED: "Please log in to continue.",
        ErrorKind.NETWORK_ERROR: "A network error occurred. Please try again.",
    },
    "tr": {
        ErrorKind.INVALID_ADDRESS: "Sunucu adresi geçersiz. Lütfen kontrol edip tekrar deneyin.",
        ErrorKind.UNREACHABLE: "Sunucuya bağlanılamadı. Lütfen sunucu adresini ve internet bağlantınızı kontrol edin.",
        ErrorKind.TIMEOUT: "Bağlantı zaman aşımına uğradı. Sunucu yanıt vermiyor olabilir veya geçici bir ağ sorunu olabilir.",
        ErrorKind.INVALID_CREDENTIALS: "Kullanıcı adı veya şifre hatalı.",
        ErrorKind.SERVER_ERROR: "Sunucu bir hata döndürdü. Lütfen daha sonra tekrar deneyin.",
        ErrorKind.UNAUTHENTICATED: "Devam etmek için lütfen giriş yapın.",
        ErrorKind.NETWORK_ERROR: "Bir ağ hatası oluştu. Lütfen tekrar deneyin.",
    },
}

DEFAULT_LOCALE = "en"


def login_message(kind: ErrorKind, locale: str = DEFAULT_LOCALE) -> str:
    """Message for a failed login; unknown locales fall back to English."""
    table = LOGIN_MESSAGES.get(locale, LOGIN_MESSAGES[DEFAULT_LOCALE])
    return table[kind]
