"""Prompt templates (prompts/list, prompts/get) for common listener tasks.

Each prompt renders a single user message that tells the agent which tools
to call and how to present the result.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .jsonrpc import INVALID_PARAMS, JSONRPCError


@dataclass(frozen=True)
class PromptArgument:
    name: str
    description: str
    required: bool = False


@dataclass(frozen=True)
class Prompt:
    name: str
    description: str
    arguments: tuple[PromptArgument, ...]
    render: Callable[[dict[str, str], datetime], str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "arguments": [
                {"name": a.name, "description": a.description, "required": a.required}
                for a in self.arguments
            ],
        }


# ============ RENDERERS ============


def _find_podcast(args: dict[str, str], now: datetime) -> str:
    topic = args["topic"]
    limit = args.get("limit") or "5"
    return f"""Jag letar efter podcasts om "{topic}" från Sveriges Radio.

Använd följande verktyg i ordning:

1. **search_programs** med:
   - query: "{topic}"
   - hasOnDemand: true (endast program med podcast)
   - size: {limit}

2. För varje intressant program, använd **get_latest_episode** för att få senaste avsnittet

3. Presentera resultaten så här:
   📻 **Programnamn** (Kanal)
   Beskrivning av programmet

   🎧 Senaste avsnitt: "Titel"
   Publicerat: [datum]
   Varaktighet: [minuter] min

   🔗 Lyssna: [listenPodFile.url]
   💾 Ladda ner: [downloadPodFile.url]

Sortera efter relevans och ge max {limit} förslag."""


def _whats_on_now(args: dict[str, str], now: datetime) -> str:
    channel = args.get("channel")
    if channel:
        channel_upper = channel.upper()
        playlist_tip = (
            "\n🎵 Bonus: Använd **get_playlist_rightnow** för att se vilken låt som spelas!"
            if channel_upper in ("P2", "P3")
            else ""
        )
        return f"""Visa vad som sänds JUST NU på {channel_upper}.

Använd följande verktyg:

1. **list_channels** för att hitta kanal-ID för {channel_upper}
2. **get_channel_rightnow** med channelId från steg 1

Presentera så här:
🔴 **PÅGÅR NU** på {channel_upper}
Kl [starttid]-[sluttid]: **Programnamn**
{playlist_tip}

📻 Live stream: [liveAudio.url]

⏮️ Föregående: [programnamn]
⏭️ Nästa: [programnamn] kl [tid]"""

    return f"""Visa en översikt av vad som sänds JUST NU på alla Sveriges Radio-kanaler.

Använd verktyget: **get_all_rightnow** med sortBy: "channel.name"

Presentera så här:

🔴 VAD SOM SÄNDS NU ({now.strftime("%H:%M")})

**P1** - [programnamn] (kl [starttid]-[sluttid])
**P2** - [programnamn] (kl [starttid]-[sluttid])
**P3** - [programnamn] (kl [starttid]-[sluttid])
**P4** - [programnamn] (kl [starttid]-[sluttid])

... och alla lokala P4-kanaler ...

💡 Tips: Välj en kanal och använd "whats-on-now" med kanalnamn för mer detaljer!"""


def _traffic_nearby(args: dict[str, str], now: datetime) -> str:
    location = args["location"]
    severity = args.get("severity")
    try:
        max_priority = int(severity) if severity else None
    except ValueError as e:
        raise JSONRPCError(INVALID_PARAMS, "severity must be an integer between 1 and 5") from e

    severity_line = f"Filtrera endast meddelanden med priority <= {max_priority}" if max_priority else ""
    critical_line = "🚨 [Mycket allvarliga händelser]" if max_priority == 1 else ""
    return f"""Kolla trafikläget för {location}.

Använd följande verktyg:

1. **get_traffic_areas** för att hitta rätt trafikområde för "{location}"
2. **get_traffic_messages** med trafficAreaName från steg 1

{severity_line}

Presentera per kategori:

🚗 **VÄGTRAFIK**
{critical_line}
[Priority] [Plats]: [Beskrivning]

🚆 **KOLLEKTIVTRAFIK**
[Priority] [Plats]: [Beskrivning]

🚧 **PLANERADE STÖRNINGAR**
[Priority] [Plats]: [Beskrivning]

ℹ️ **ÖVRIGT**
[Priority] [Plats]: [Beskrivning]

Legend: Priority 1=🚨 Mycket allvarlig, 2=⚠️ Stor händelse, 3=⚡ Störning, 4=ℹ️ Info, 5=💨 Mindre"""


def _news_briefing(args: dict[str, str], now: datetime) -> str:
    program = args.get("program")
    if program:
        heading = "Huvudnyheter" if program == "Ekot" else "Innehåll"
        return f"""Ge mig senaste nyheterna från {program}.

Använd följande verktyg:

1. **search_programs** med query="{program}" för att hitta program-ID
2. **get_latest_episode** med programId från steg 1

Presentera så här:

📰 **{program.upper()}**
Publicerat: [publishDateUtc, formatera till svensk tid]
Varaktighet: [duration] sekunder

📝 {heading}:
[description]

🎧 Lyssna: [listenPodFile.url]
🔗 Länk: [url]"""

    return f"""Ge mig en sammanfattning av senaste nyheterna från Sveriges Radio.

Använd verktyget: **get_latest_news_episodes**

Gruppera och presentera:

📰 **SENASTE NYHETERNA** ({now.date().isoformat()})

**RIKSNYHETER:**
• Ekot - [titel] ([tid])
• Ekonomiekot - [titel] ([tid])
• Kulturnytt - [titel] ([tid])

**LOKALA NYHETER:**
• P4 [Region] - [titel] ([tid])
(visa 3-5 olika regioner)

💡 För mer detaljer, använd "news-briefing" med specifikt program!"""


def _explore_schedule(args: dict[str, str], now: datetime) -> str:
    channel = args["channel"]
    date = args.get("date")
    today = now.date().isoformat()
    date_str = date or today
    is_today = date_str == today

    when = f" den {date}" if date else " idag"
    now_marker = "🔴 = Sänds NU\n" if is_today else ""
    return f"""Visa tablån för {channel}{when}.

Använd följande verktyg:

1. **list_channels** för att hitta kanal-ID för {channel}
2. **get_channel_schedule** med:
   - channelId från steg 1
   - date: "{date_str}"

Presentera kronologiskt:

📅 **TABLÅ FÖR {channel.upper()}** - {"IDAG" if is_today else date_str}

{now_marker}
06:00 - 09:00: **Morgonprogram**
   [Beskrivning]{" 🔴" if is_today else ""}

09:00 - 12:00: **Förmiddagsprogram**
   [Beskrivning]

12:00 - 15:00: **Eftermiddagsprogram**
   [Beskrivning]

... och så vidare ...

⭐ = Program med tillgänglig podcast
🎵 = Musikprogram

💡 Tips: Använd get_episode för program-ID att få ljudfiler!"""


def _whats_playing_now(args: dict[str, str], now: datetime) -> str:
    channel_upper = args["channel"].upper()
    is_p2 = channel_upper == "P2"
    song_label = "NU:" if is_p2 else "Current Song:"
    credit = "🎻 Kompositör: [composer]" if is_p2 else "🎤 Artist: [artist]"
    p2_tip = "🎼 Tips: P2 spelar klassisk musik! För popmusik, prova P3!" if is_p2 else ""
    return f"""Visa vilken låt som spelas JUST NU på {channel_upper}!

Använd följande verktyg:

1. **list_channels** för att hitta kanal-ID för {channel_upper}
2. **get_playlist_rightnow** med channelId från steg 1

Presentera så här:

🎵 **NU SPELAS PÅ {channel_upper}**

🎼 **{song_label}**
"[Titel]"
{credit}
💿 Album: [albumName]
🏷️ Skivbolag: [recordLabel]

⏰ Spelas: [startTimeUtc] - [stopTimeUtc]

{p2_tip}

⏭️ **NÄSTA LÅT:**
"[nextSong.title]" - [nextSong.artist]

💡 Använd **get_channel_rightnow** för att se vilket program som sänds!"""


# ============ REGISTRY ============

PROMPTS: list[Prompt] = [
    Prompt(
        name="find-podcast",
        description="Hitta och lyssna på podcasts från Sveriges Radio baserat på ämne eller intresse",
        arguments=(
            PromptArgument("topic", 'Vad är du intresserad av? (t.ex. "historia", "true crime", "politik", "musik")', True),
            PromptArgument("limit", "Max antal förslag (default: 5)"),
        ),
        render=_find_podcast,
    ),
    Prompt(
        name="whats-on-now",
        description="Se vad som sänds just nu på Sveriges Radio - på en kanal eller alla kanaler",
        arguments=(
            PromptArgument("channel", "Specifik kanal (P1, P2, P3, P4) eller lämna tomt för alla kanaler"),
        ),
        render=_whats_on_now,
    ),
    Prompt(
        name="traffic-nearby",
        description="Kolla trafikläget i ditt område - olyckor, köer, vägarbeten och störningar",
        arguments=(
            PromptArgument("location", 'Plats eller område (t.ex. "Stockholm", "Göteborg", "E4")', True),
            PromptArgument(
                "severity",
                "Min allvarlighetsgrad 1-5 (1=mycket allvarlig, 5=mindre störning). Default: alla nivåer",
            ),
        ),
        render=_traffic_nearby,
    ),
    Prompt(
        name="news-briefing",
        description="Få en sammanfattning av senaste nyheterna från Sveriges Radio",
        arguments=(
            PromptArgument(
                "program",
                'Specifikt nyhetsprogram (t.ex. "Ekot", "Ekonomiekot", "Kulturnytt") '
                "eller lämna tomt för alla nyheter",
            ),
        ),
        render=_news_briefing,
    ),
    Prompt(
        name="explore-schedule",
        description="Utforska Sveriges Radios tablå för en kanal och datum",
        arguments=(
            PromptArgument("channel", 'Kanal (P1, P2, P3, P4, eller region som "P4 Stockholm")', True),
            PromptArgument("date", "Datum (YYYY-MM-DD) - lämna tomt för idag"),
        ),
        render=_explore_schedule,
    ),
    Prompt(
        name="whats-playing-now",
        description="🎵 Visa vilken låt som spelas just nu på en musikkanal (perfekt för P2!)",
        arguments=(PromptArgument("channel", 'Musikkanal (t.ex. "P2", "P3", "SR Klassiskt")', True),),
        render=_whats_playing_now,
    ),
]

_BY_NAME = {prompt.name: prompt for prompt in PROMPTS}


def list_prompts() -> list[dict[str, Any]]:
    return [prompt.to_dict() for prompt in PROMPTS]


def get_prompt(name: str, arguments: dict[str, Any] | None = None, now: datetime | None = None) -> dict[str, Any]:
    """Result payload for prompts/get.

    Raises:
        JSONRPCError: unknown prompt, non-object arguments or missing required argument (-32602).
    """
    prompt = _BY_NAME.get(name)
    if prompt is None:
        raise JSONRPCError(INVALID_PARAMS, f"Unknown prompt: {name}")
    if arguments is not None and not isinstance(arguments, dict):
        raise JSONRPCError(INVALID_PARAMS, "Invalid params: prompt arguments must be an object")

    args = {key: str(value) for key, value in (arguments or {}).items() if value is not None}
    missing = [a.name for a in prompt.arguments if a.required and not args.get(a.name)]
    if missing:
        raise JSONRPCError(INVALID_PARAMS, f"Missing required argument(s) for {name}: {', '.join(missing)}")

    text = prompt.render(args, now or datetime.now().astimezone())
    return {
        "description": prompt.description,
        "messages": [{"role": "user", "content": {"type": "text", "text": text}}],
    }
