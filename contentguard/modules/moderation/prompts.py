"""Moderation prompts and user-facing message templates.

All text sent to AI providers and all canned reasoning shown to users lives here.

USAGE:
    from contentguard.modules.moderation.prompts import build_content_analysis_prompt

    prompt = build_content_analysis_prompt("some text", "text")
"""

# =============================================================================
# RESPONSE FORMAT
# Shared instructions for the structured analysis result.
# =============================================================================

_ANALYSIS_RESPONSE_FORMAT = """Respond with ONLY a JSON object containing:
- isSafe (boolean): true only if {subject} is completely appropriate
- concerns (array of strings): List ALL specific concerns found (use exact categories like "Adult/Explicit Content", "Graphic Violence", etc.)
- severity (string): "low" for minor issues, "medium" for moderate concerns, "high" for serious violations
- detailedReason (string): A clear explanation of why the {subject} was flagged or rejected, suitable for showing to users"""


# =============================================================================
# TEXT / URL ANALYSIS
# =============================================================================

CONTENT_ANALYSIS_PROMPT: str = """You are a strict content moderation AI. Analyze the following {content_type} content for safety and appropriateness.

Content: {content}

Carefully check for the following violations (be very strict):

1. **Adult/Explicit Content (+18)**:
   - Sexual content, nudity, or sexually suggestive material
   - Pornographic or erotic content
   - Sexual solicitation or services
   - Content intended for mature audiences only

2. **Violence**:
   - Graphic violence, gore, or bloodshed
   - Depictions of physical harm or torture
   - Weapons used in threatening contexts
   - Self-harm or suicide content
   - Animal cruelty

3. **Hate Speech & Discrimination**:
   - Targeting individuals or groups based on race, religion, ethnicity, gender, sexual orientation, etc.
   - Slurs, derogatory language, or hate symbols

4. **Threats & Harassment**:
   - Direct threats of violence or harm
   - Cyberbullying, stalking, or intimidation
   - Doxxing or privacy violations

5. **Illegal Content**:
   - Drug trafficking or illegal substance promotion
   - Illegal weapons sales
   - Human trafficking or exploitation
   - Child exploitation (IMMEDIATE REJECT)

6. **Spam & Misinformation**:
   - Misleading or false information
   - Scams or fraudulent schemes
   - Excessive promotional content

Be extremely cautious with:
- Images that might contain hidden inappropriate content
- URLs that might lead to inappropriate websites
- Text with coded language or euphemisms for inappropriate content

{response_format}"""


# =============================================================================
# IMAGE ANALYSIS
# =============================================================================

VISION_ANALYSIS_PROMPT: str = """You are a strict content moderation AI with vision capabilities. Analyze this image for safety and appropriateness.

Carefully check for the following violations (be very strict):

1. **Adult/Explicit Content (+18)**:
   - Nudity, sexual content, or sexually suggestive poses/clothing
   - Pornographic or erotic imagery
   - Sexual acts or suggestive gestures

2. **Violence**:
   - Graphic violence, gore, blood, or injuries
   - Weapons in threatening contexts
   - Depictions of physical harm
   - Self-harm or suicide imagery

3. **Hate Symbols & Discrimination**:
   - Hate symbols, offensive gestures, or discriminatory imagery
   - Racist, sexist, or other discriminatory content

4. **Illegal Content**:
   - Drug paraphernalia or illegal substances
   - Child exploitation (IMMEDIATE REJECT)
   - Illegal activities

5. **Other Violations**:
   - Graphic disturbing content
   - Animal cruelty

{response_format}"""


# =============================================================================
# VISUALIZATION
# =============================================================================

VISUALIZATION_DECISION_PROMPT: str = """You are a content moderation decision assistant. A piece of content has been flagged for manual review.

Content Type: {content_type}
Content: {content}
Concerns: {concerns}
Severity: {severity}
Reason: {reason}

Your task: Decide if generating a visual preview/illustration would help human reviewers understand the flagged concerns.

Consider generating a visualization when:
- The concern is complex or abstract and would benefit from visual explanation
- Visual representation would help illustrate the specific policy violation
- The flagged content involves visual elements that need context (e.g., images with subtle inappropriate elements)
- A diagram could help explain why borderline content was flagged

DO NOT generate visualization when:
- The concern is straightforward and self-explanatory from text alone
- The flagged content is simple text with obvious issues
- Visualization would not add meaningful value to the review process
- The concern is purely textual (e.g., spelling mistakes, simple spam)

Respond with ONLY a JSON object:
{{
  "shouldGenerate": true/false,
  "reasoning": "Brief explanation of why visualization is/isn't needed"
}}"""

VISUALIZATION_IMAGE_PROMPT: str = """Create a simple, educational diagram or illustration that explains content moderation concerns.
The image should visually represent: {reasoning}.
Style: clean, professional, informational diagram with icons or symbols representing safety concerns.
Do not include any offensive content - this is an explanatory visualization only."""


# =============================================================================
# DECISION MESSAGES
# Shown to the submitting user. {concerns} is the comma-joined concern list.
# =============================================================================

APPROVED_MESSAGE: str = "Content approved. Your content meets all community guidelines and safety standards."

FLAGGED_MESSAGE: str = (
    "Your content has been flagged for manual review due to potential concerns: {concerns}. "
    "This content will be reviewed by our moderation team before publication."
)

REJECTED_ADULT_MESSAGE: str = (
    "Your content has been rejected because it contains adult or sexually explicit material (+18). "
    "Our platform does not allow pornographic content, nudity, or sexually suggestive material. "
    "Specific concerns: {concerns}."
)

REJECTED_VIOLENCE_MESSAGE: str = (
    "Your content has been rejected because it contains graphic violence or harmful content. "
    "Our platform prohibits content depicting violence, gore, self-harm, or cruelty. "
    "Specific concerns: {concerns}."
)

REJECTED_MINORS_MESSAGE: str = (
    "Your content has been rejected due to serious safety violations involving minors. "
    "This type of content is strictly prohibited and may be reported to authorities."
)

REJECTED_GENERIC_MESSAGE: str = (
    "Your content has been rejected because it violates our community guidelines. "
    "Specific violations: {concerns}. Please review our content policy and submit appropriate content."
)


# =============================================================================
# PROMPT BUILDERS
# =============================================================================


def build_content_analysis_prompt(content: str, content_type: str) -> str:
    """Build the text/URL analysis prompt with the raw content embedded."""
    return CONTENT_ANALYSIS_PROMPT.format(
        content_type=content_type,
        content=content,
        response_format=_ANALYSIS_RESPONSE_FORMAT.format(subject="content"),
    )


def build_vision_analysis_prompt() -> str:
    return VISION_ANALYSIS_PROMPT.format(response_format=_ANALYSIS_RESPONSE_FORMAT.format(subject="image"))


def build_visualization_decision_prompt(
    content: str,
    content_type: str,
    concerns: list[str],
    severity: str,
    reason: str | None,
) -> str:
    return VISUALIZATION_DECISION_PROMPT.format(
        content_type=content_type,
        content=content,
        concerns=", ".join(concerns),
        severity=severity,
        reason=reason or "",
    )


def build_visualization_image_prompt(reasoning: str) -> str:
    return VISUALIZATION_IMAGE_PROMPT.format(reasoning=reasoning)
