# ABOUTME: SSML document construction for Azure speech synthesis requests
# ABOUTME: Escapes user text and adds prosody and mstts:express-as elements for rate, style and role

from typing import Optional
from xml.sax.saxutils import escape, quoteattr

from azure_tts.models.voices import StyleSsml, Voice, VoiceRole

SSML_NAMESPACE = "http://www.w3.org/2001/10/synthesis"
MSTTS_NAMESPACE = "https://www.w3.org/2001/mstts"


def build_ssml(
    voice: Voice,
    text: str,
    rate: float = 1.0,
    style: Optional[StyleSsml] = None,
    role: Optional[VoiceRole] = None,
) -> str:
    """
    Build the SSML request body for one synthesis call.

    Args:
        voice: Voice the text is spoken with
        text: Plain text; XML special characters are escaped
        rate: Prosody rate, 1.0 is normal speed
        style: Optional speaking style and its degree
        role: Optional role-play persona

    Returns:
        SSML document as a string
    """
    content = f"<prosody rate='{rate}'>{escape(text)}</prosody>"

    if style is not None or role is not None:
        attributes = []
        if style is not None:
            attributes.append(f"style={quoteattr(style.style_name)}")
            attributes.append(f"styledegree='{style.style_degree}'")
        if role is not None:
            attributes.append(f"role={quoteattr(role.value)}")
        content = f"<mstts:express-as {' '.join(attributes)}>{content}</mstts:express-as>"

    return (
        f"<speak version='1.0' xmlns='{SSML_NAMESPACE}' "
        f"xmlns:mstts='{MSTTS_NAMESPACE}' xml:lang={quoteattr(voice.locale)}>"
        f"<voice xml:lang={quoteattr(voice.locale)} xml:gender={quoteattr(voice.gender)} "
        f"name={quoteattr(voice.short_name)}>"
        f"{content}"
        "</voice></speak>"
    )
