"""Editorial suggestion prompt templates.

Contains prompts for:
- EDITORIAL_SUGGESTIONS_V1: Summary, titles, descriptions and thumbnail moments for a news video
"""

# Editorial suggestions prompt for the channel's YouTube desk.
# Template placeholders: {reporter_name}, {video_date}, {channel_name}
# Literal JSON braces are doubled for str.format.
EDITORIAL_SUGGESTIONS_V1 = """אתה עורך דיגיטל מומחה בערוץ היוטיוב של "{channel_name}". נתח את הסרטון וצור הצעות תוכן.

שם הכתב/ת: {reporter_name}
תאריך שידור: {video_date}

החזר את התשובה בפורמט JSON המדויק הזה:

{{
  "summary": "תקציר קצר ובהיר של הכתבה ב-2-3 משפטים",
  "titles": [
    "כותרת חדשותית ישירה",
    "כותרת עם זווית מעניינת",
    "כותרת עם אלמנט של סקרנות"
  ],
  "descriptions": [
    "תיאור קצר של הכתבה. {attribution}",
    "תיאור אחר של הכתבה. {attribution}"
  ],
  "thumbnails": [
    {{
      "timestamp": "MM:SS.XXX",
      "description": "תיאור הפריים הראשון"
    }},
    {{
      "timestamp": "MM:SS.XXX",
      "description": "תיאור הפריים השני"
    }}
  ]
}}

הערה חשובה: טיימקוד צריך להיות מדויק בפורמט MM:SS.XXX (למשל: 02:15.750)"""

# Fixed closing sentence of every description
# Template placeholders: {reporter_name}, {video_date}, {channel_name}
ATTRIBUTION_SENTENCE = "כתבתו/כתבתה של {reporter_name} מתוך מהדורת {channel_name}, {video_date}."


def build_editorial_prompt(reporter_name: str, video_date: str, channel_name: str) -> str:
    """Fill EDITORIAL_SUGGESTIONS_V1 with the reporter, air date and channel.

    Values are inserted verbatim. Braces inside them are not interpreted.
    """
    attribution = ATTRIBUTION_SENTENCE.format(
        reporter_name=reporter_name,
        video_date=video_date,
        channel_name=channel_name,
    )
    return EDITORIAL_SUGGESTIONS_V1.format(
        reporter_name=reporter_name,
        video_date=video_date,
        channel_name=channel_name,
        attribution=attribution,
    )
