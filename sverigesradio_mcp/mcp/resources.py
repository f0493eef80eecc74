"""Static reference resources (resources/list, resources/read).

Content is fixed reference data, so reading a resource is idempotent and
never touches the upstream API.
"""

import json
from typing import Any

from .jsonrpc import INVALID_PARAMS, JSONRPCError

API_INFO: dict[str, Any] = {
    "name": "Sveriges Radio Open API",
    "version": "v2",
    "baseUrl": "https://api.sr.se/api/v2",
    "authentication": "None (public API)",
    "formats": ["json", "xml", "jsonp"],
    "caching": {
        "enabled": True,
        "method": "HTTP ETags (304 Not Modified)",
        "levels": {
            "veryShort": "< 1 minute",
            "short": "~5 minutes",
            "medium": "~30 minutes",
            "long": "~2 hours",
            "veryLong": "~12 hours",
        },
    },
    "rateLimits": {
        "note": "No official rate limits published, but be respectful",
        "recommendation": "Cache responses and avoid excessive requests",
    },
    "status": {
        "maintenance": "Maintained but not actively developed",
        "stability": "Stable - API has been running for years",
        "availability": "Available until further notice",
    },
    "documentation": "https://api.sr.se/api/documentation/v2/",
    "support": {
        "official": "Limited - API is provided as-is",
        "community": "GitHub discussions and issues",
    },
    "defaultParameters": {
        "format": "json",
        "audioQuality": "hi",
        "pagination": True,
        "size": 10,
        "liveAudioTemplateId": 2,
        "onDemandAudioTemplateId": 1,
    },
}

_LOCAL_CHANNELS = [
    (213, "P4 Blekinge", "Blekinge"),
    (214, "P4 Dalarna", "Dalarna"),
    (215, "P4 Gotland", "Gotland"),
    (216, "P4 Gävleborg", "Gävleborg"),
    (217, "P4 Göteborg", "Göteborg"),
    (218, "P4 Halland", "Halland"),
    (219, "P4 Jämtland", "Jämtland"),
    (220, "P4 Jönköping", "Jönköping"),
    (221, "P4 Kalmar", "Kalmar"),
    (222, "P4 Kristianstad", "Kristianstad"),
    (223, "P4 Kronoberg", "Kronoberg"),
    (224, "P4 Malmöhus", "Malmö"),
    (225, "P4 Norrbotten", "Norrbotten"),
    (226, "P4 Sjuhärad", "Sjuhärad"),
    (227, "P4 Skaraborg", "Skaraborg"),
    (228, "P4 Stockholm", "Stockholm"),
    (229, "P4 Sörmland", "Sörmland"),
    (230, "P4 Uppland", "Uppsala"),
    (231, "P4 Värmland", "Värmland"),
    (232, "P4 Västerbotten", "Västerbotten"),
    (233, "P4 Västernorrland", "Västernorrland"),
    (234, "P4 Västmanland", "Västmanland"),
    (235, "P4 Väst", "Västra Götaland"),
    (236, "P4 Örebro", "Örebro"),
    (237, "P4 Östergötland", "Östergötland"),
]

CHANNELS: dict[str, Any] = {
    "rikskanaler": [
        {"id": 132, "name": "P1", "description": "den talade kanalen", "color": "31a1bd",
         "type": "Rikskanal", "focus": "Nyheter, samhälle, kultur"},
        {"id": 163, "name": "P2", "description": "klassisk musik och kultur", "color": "e02e3d",
         "type": "Rikskanal", "focus": "Klassisk musik, jazz, folkmusik"},
        {"id": 164, "name": "P3", "description": "ung svensk radio", "color": "ffed00",
         "type": "Rikskanal", "focus": "Populärmusik, ungdomskultur"},
        {"id": 701, "name": "P4", "description": "sveriges lokalradio", "color": "6db928",
         "type": "Rikskanal", "focus": "Lokala nyheter och musik"},
    ],
    "lokalkanaler": [
        {"id": channel_id, "name": name, "region": region} for channel_id, name, region in _LOCAL_CHANNELS
    ],
    "specialkanaler": [
        {"id": 2562, "name": "P4 Plus", "description": "Extra P4-innehåll"},
        {"id": 4540, "name": "Radioapans knattekanal", "description": "Barnradio"},
        {"id": 4951, "name": "SR Klassiskt", "description": "Klassisk musik dygnet runt"},
    ],
    "usage": {
        "note": "Use channel IDs in API calls",
        "example": "list_channels with channelId=132 gets P1",
    },
}

AUDIO_QUALITY_GUIDE: dict[str, Any] = {
    "qualities": {
        "hi": {
            "bitrate": "192-320 kbps",
            "description": "Högsta kvalitet",
            "usage": "Rekommenderat för bästa ljudupplevelse",
            "fileSize": "Större filer (~20-40 MB per timme)",
            "recommended": True,
        },
        "normal": {
            "bitrate": "96-128 kbps",
            "description": "Standard kvalitet",
            "usage": "Bra balans mellan kvalitet och storlek",
            "fileSize": "Medel (~10-15 MB per timme)",
            "recommended": False,
        },
        "low": {
            "bitrate": "32-64 kbps",
            "description": "Låg kvalitet",
            "usage": "För begränsad bandbredd eller mobil data",
            "fileSize": "Små filer (~5 MB per timme)",
            "recommended": False,
        },
    },
    "streamFormats": {
        "live": {
            "templateId_1": {
                "format": "AAC",
                "description": "Modern, effektiv komprimering",
                "compatibility": "De flesta moderna enheter",
            },
            "templateId_2": {
                "format": "MP3",
                "description": "Klassiskt format",
                "compatibility": "Universell kompatibilitet",
                "default": True,
            },
        },
        "onDemand": {
            "listenPodFile": {
                "description": "För streaming/uppspelning",
                "includes": "Musik inkluderad",
                "format": "MP3/M4A",
            },
            "downloadPodFile": {
                "description": "För nedladdning",
                "includes": "Musik borttagen (licensskäl)",
                "format": "MP3",
            },
            "broadcast": {
                "description": "Komplett sändning",
                "includes": "All musik inkluderad",
                "format": "M4A",
            },
        },
    },
    "recommendations": {
        "streaming": 'Använd "hi" kvalitet för bästa upplevelse',
        "downloading": 'Använd "normal" för att spara utrymme',
        "mobile": 'Använd "low" vid dålig uppkoppling',
        "podcast": "listenPodFile för streaming, downloadPodFile för offline",
    },
    "apiParameters": {
        "audioQuality": "low | normal | hi (default: hi)",
        "liveAudioTemplateId": "1 (AAC) | 2 (MP3, default)",
        "onDemandAudioTemplateId": "1 (default)",
    },
}

_CATEGORIES = [
    (1, "Kultur", "Konst, litteratur, film, teater"),
    (2, "Musik", "Alla musikgenrer och musikprogram"),
    (3, "Livsstil", "Hälsa, mat, trädgård, boende"),
    (4, "Underhållning", "Humor, quiz, underhållning"),
    (5, "Dokumentär", "Dokumentärer och reportage"),
    (6, "Vetenskap", "Forskning, teknik, natur"),
    (7, "Samhälle", "Politik, ekonomi, samhällsfrågor"),
    (8, "Barn", "Program för barn och ungdomar"),
    (9, "Sport", "Sportreportage och sportprogram"),
    (10, "Nyheter", "Nyheter och aktualiteter"),
    (11, "Natur", "Natur, djur, miljö"),
    (12, "Historia", "Historiska program och berättelser"),
    (13, "Drama", "Radioteater och ljuddrama"),
    (14, "Religion", "Religion och livsfrågor"),
    (15, "Blandat", "Blandade ämnen"),
]

PROGRAM_CATEGORIES: dict[str, Any] = {
    "categories": [
        {"id": category_id, "name": name, "description": description}
        for category_id, name, description in _CATEGORIES
    ],
    "usage": {
        "apiTool": "list_program_categories",
        "filter": "Use programCategoryId in search_programs",
        "example": "search_programs with programCategoryId=10 gets news programs",
    },
    "popularCategories": [
        {"id": 10, "name": "Nyheter", "programs": "Ekot, Ekonomiekot, Kulturnytt"},
        {"id": 5, "name": "Dokumentär", "programs": "P3 Dokumentär, P1 Dokumentär"},
        {"id": 2, "name": "Musik", "programs": "P2 Musik, Musikguiden"},
        {"id": 7, "name": "Samhälle", "programs": "Studio Ett, Konflikt"},
    ],
}

RESOURCES: list[dict[str, Any]] = [
    {
        "uri": "sr://api/info",
        "name": "Sveriges Radio API Information",
        "description": "API version, base URL, capabilities, and usage information",
        "mimeType": "application/json",
        "content": API_INFO,
    },
    {
        "uri": "sr://channels/all",
        "name": "Complete Channel List",
        "description": "All SR channels with IDs, names, and types for quick reference",
        "mimeType": "application/json",
        "content": CHANNELS,
    },
    {
        "uri": "sr://audio/quality-guide",
        "name": "Audio Quality & Formats Guide",
        "description": "Audio quality levels, streaming formats, and usage recommendations",
        "mimeType": "application/json",
        "content": AUDIO_QUALITY_GUIDE,
    },
    {
        "uri": "sr://categories/programs",
        "name": "Program Categories Reference",
        "description": "All program categories with IDs (Nyheter, Musik, Sport, etc.)",
        "mimeType": "application/json",
        "content": PROGRAM_CATEGORIES,
    },
]

_BY_URI = {resource["uri"]: resource for resource in RESOURCES}


def list_resources() -> list[dict[str, Any]]:
    return [{key: value for key, value in r.items() if key != "content"} for r in RESOURCES]


def read_resource(uri: str) -> dict[str, Any]:
    """Result payload for resources/read.

    Raises:
        JSONRPCError: unknown URI (-32602).
    """
    resource = _BY_URI.get(uri)
    if resource is None:
        raise JSONRPCError(INVALID_PARAMS, f"Unknown resource: {uri}")
    return {
        "contents": [
            {
                "uri": uri,
                "mimeType": resource["mimeType"],
                "text": json.dumps(resource["content"], indent=2, ensure_ascii=False),
            }
        ]
    }
