import logging

from gallery.core.storage import LANG_KEY, JsonStorage

LOG = logging.getLogger("gallery.i18n")

DEFAULT_LANG = "tr"

TRANSLATIONS: dict[str, dict[str, str]] = {
    "tr": {
        "appTitle": "İlan Galerisi",
        "create": "İlan Oluştur",
        "adminPanel": "Admin Paneli",
        "fav": "Favoriler",
        "all": "Tümü",
        "sqm": "Metrekare",
        "rooms": "Oda",
        "desc": "Açıklama",
        "register": "Kayıt Ol",
        "login": "Giriş Yap",
        "logout": "Çıkış",
        "favAdd": "Favorilere Ekle",
        "favRemove": "Favoriden Çıkar",
        "openMap": "Haritada Aç",
        "remove": "Kaldır",
        "restore": "Geri Al",
        "deleteForever": "Sil (kalıcı)",
        "removedBadge": "kaldırıldı",
        "noResults": "Bu filtrelerle ilan bulunamadı.",
        "results": "İlanlar",
        "created": "İlan oluşturuldu",
        "createUsage": "Kullanım: /new başlık | fiyat | il | ilçe | m² | oda | açıklama",
        "authUsage": "Kullanım: /login kullanıcı şifre",
        "registered": "Kaydolundu",
        "userExists": "Kullanıcı var",
        "badLogin": "Hatalı kullanıcı",
        "welcome": "Hoş geldin",
        "loggedOut": "Çıkış yapıldı",
        "anonymous": "Giriş yapılmadı",
        "adminOnly": "Bu işlem için admin yetkisi gerekir.",
        "notFound": "İlan bulunamadı.",
        "unknownArea": "Bilinmeyen bölge",
        "langSet": "Dil değiştirildi",
        "filtersCleared": "Filtreler temizlendi",
        "help": (
            "/browse [arama] — ilanları göster\n"
            "/province <il> · /district <ilçe> — bölge filtresi\n"
            "/all · /favs — sekme\n"
            "/search <metin> · /clear — arama ve temizleme\n"
            "/new — ilan oluştur\n"
            "/register · /login · /logout · /whoami\n"
            "/lang tr|en · /admin"
        ),
    },
    "en": {
        "appTitle": "Listing Gallery",
        "create": "Create Listing",
        "adminPanel": "Admin Panel",
        "fav": "Favorites",
        "all": "All",
        "sqm": "Sqm",
        "rooms": "Rooms",
        "desc": "Description",
        "register": "Register",
        "login": "Login",
        "logout": "Logout",
        "favAdd": "Add to favorites",
        "favRemove": "Remove from favorites",
        "openMap": "Open on map",
        "remove": "Remove",
        "restore": "Restore",
        "deleteForever": "Delete (permanent)",
        "removedBadge": "removed",
        "noResults": "No listings match these filters.",
        "results": "Listings",
        "created": "Listing created",
        "createUsage": "Usage: /new title | price | province | district | sqm | rooms | description",
        "authUsage": "Usage: /login username password",
        "registered": "Registered",
        "userExists": "User already exists",
        "badLogin": "Wrong username or password",
        "welcome": "Welcome",
        "loggedOut": "Logged out",
        "anonymous": "Not logged in",
        "adminOnly": "This action needs the admin role.",
        "notFound": "Listing not found.",
        "unknownArea": "Unknown area",
        "langSet": "Language changed",
        "filtersCleared": "Filters cleared",
        "help": (
            "/browse [text] — show listings\n"
            "/province <name> · /district <name> — area filter\n"
            "/all · /favs — tab\n"
            "/search <text> · /clear — search and reset\n"
            "/new — create a listing\n"
            "/register · /login · /logout · /whoami\n"
            "/lang tr|en · /admin"
        ),
    },
}


def t(lang: str, key: str) -> str:
    table = TRANSLATIONS.get(lang, TRANSLATIONS[DEFAULT_LANG])
    return table.get(key, key)


class LanguagePreference:
    def __init__(self, storage: JsonStorage):
        self._storage = storage
        lang = storage.load(LANG_KEY, DEFAULT_LANG)
        if not isinstance(lang, str) or lang not in TRANSLATIONS:
            LOG.warning("Ignoring stored language %r", lang)
            lang = DEFAULT_LANG
        self._lang = lang

    @property
    def lang(self) -> str:
        return self._lang

    def set(self, lang: str) -> None:
        if lang not in TRANSLATIONS:
            raise ValueError(f"unsupported language {lang!r}")
        self._lang = lang
        self._storage.save(LANG_KEY, lang)
