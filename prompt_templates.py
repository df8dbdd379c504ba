"""Starter prompt templates users can copy into their library.

Updates: v0.1.1 - 2026-10-09 - Add image generation starters.
Updates: v0.1.0 - 2026-10-04 - Centralise starter templates for the record store and CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class PromptTemplate:
    """Read-only blueprint for a new prompt."""

    title: str
    content: str
    category: str
    tags: Tuple[str, ...] = field(default_factory=tuple)
    ai_model: str = "ChatGPT"
    notes: Optional[str] = None


CODE_REVIEW_TEMPLATE = PromptTemplate(
    title="Code Review",
    content=(
        "Review the following code and provide feedback on:\n\n"
        "1. **Code Quality**: Best practices, design patterns, and maintainability\n"
        "2. **Potential Issues**: Bugs, security vulnerabilities, or edge cases\n"
        "3. **Performance**: Optimization opportunities\n"
        "4. **Readability**: Clear naming, comments, and structure\n\n"
        "```\n[Insert your code here]\n```\n\n"
        "Please provide specific, actionable suggestions."
    ),
    category="Code",
    tags=("code-review", "best-practices", "debugging"),
    ai_model="Claude",
    notes="Great for comprehensive code reviews",
)

DEBUG_ASSISTANT_TEMPLATE = PromptTemplate(
    title="Debug Assistant",
    content=(
        "I'm encountering an error and need help debugging:\n\n"
        "**Error Message:**\n```\n[Paste error here]\n```\n\n"
        "**Code Context:**\n```\n[Paste relevant code]\n```\n\n"
        "**What I've Tried:**\n1. [Attempt 1]\n2. [Attempt 2]\n\n"
        "Please:\n1. Explain the root cause\n2. Provide step-by-step fix\n"
        "3. Suggest prevention strategies\n4. Show corrected code"
    ),
    category="Code",
    tags=("debugging", "troubleshooting", "error-fixing"),
    ai_model="ChatGPT",
    notes="Essential for quick bug fixes",
)

UNIT_TEST_TEMPLATE = PromptTemplate(
    title="Write Unit Tests",
    content=(
        "Generate comprehensive unit tests for:\n\n"
        "```\n[Paste your code/function]\n```\n\n"
        "**Testing Framework:** [Jest/Mocha/PyTest/etc.]\n\n"
        "Cover happy paths, edge cases, error handling, and boundary conditions. "
        "Mock external dependencies and include clear test descriptions."
    ),
    category="Code",
    tags=("testing", "unit-tests", "quality-assurance"),
    ai_model="ChatGPT",
    notes="Ensures code quality and reliability",
)

BLOG_OUTLINE_TEMPLATE = PromptTemplate(
    title="Blog Post Outline",
    content=(
        "Create a detailed blog post outline for: **[TOPIC]**\n\n"
        "Target Audience: [Describe audience]\n"
        "Desired Tone: [Professional/Casual/Technical/etc.]\n\n"
        "Please include:\n- 3-5 engaging title options\n- Hook/Introduction\n"
        "- 5-7 main sections with subpoints\n- Key takeaways\n- Call to action"
    ),
    category="Writing",
    tags=("blogging", "content-creation", "outline"),
    ai_model="ChatGPT",
    notes="Perfect for content planning",
)

TECHNICAL_DOCS_TEMPLATE = PromptTemplate(
    title="Technical Documentation",
    content=(
        "Write technical documentation for: **[Feature/API/Module]**\n\n"
        "Include an overview, prerequisites, installation steps, usage examples, "
        "configuration options, and troubleshooting notes. Use clear headings and code blocks."
    ),
    category="Writing",
    tags=("documentation", "technical-writing", "api-docs"),
    ai_model="Claude",
    notes="Essential for developer docs",
)

DATA_ANALYSIS_TEMPLATE = PromptTemplate(
    title="Data Analysis",
    content=(
        "Analyze the following dataset and provide insights:\n\n"
        "**Dataset:** [Describe or paste data]\n**Goal:** [What questions to answer]\n\n"
        "Summarise key trends, notable outliers, correlations, and recommended next steps."
    ),
    category="Analysis",
    tags=("data-analysis", "statistics", "insights"),
    ai_model="Claude",
    notes="Excellent for business intelligence",
)

SWOT_TEMPLATE = PromptTemplate(
    title="SWOT Analysis",
    content=(
        "Conduct a SWOT analysis for: **[Company/Product/Project]**\n\n"
        "List strengths, weaknesses, opportunities, and threats, then propose "
        "strategies that use strengths to capture opportunities and mitigate threats."
    ),
    category="Analysis",
    tags=("swot", "strategy", "business-analysis"),
    ai_model="ChatGPT",
    notes="Strategic planning tool",
)

STORY_OPENER_TEMPLATE = PromptTemplate(
    title="Creative Story Opener",
    content=(
        "Write an engaging opening paragraph for a story with these elements:\n\n"
        "**Genre:** [Genre]\n**Setting:** [Time and place]\n**Main Character:** [Brief description]\n"
        "**Mood:** [Tone]\n\nHook the reader in the first sentence and hint at the central conflict."
    ),
    category="Creative",
    tags=("storytelling", "fiction", "creative-writing"),
    ai_model="ChatGPT",
    notes="Great for overcoming writer's block",
)

BRAINSTORM_TEMPLATE = PromptTemplate(
    title="Brainstorm Creative Ideas",
    content=(
        "Help me brainstorm creative ideas for: **[Project/Problem]**\n\n"
        "Constraints: [Budget, time, audience]\n\n"
        "Give 10 diverse ideas ranging from practical to unconventional, "
        "each with a one-line rationale."
    ),
    category="Creative",
    tags=("brainstorming", "ideation", "creativity"),
    ai_model="ChatGPT",
    notes="Unlock creative possibilities",
)

MEETING_SUMMARY_TEMPLATE = PromptTemplate(
    title="Meeting Summary",
    content=(
        "Summarize the following meeting notes:\n\n[Paste notes or transcript]\n\n"
        "Include key decisions, action items with owners and deadlines, "
        "open questions, and next steps."
    ),
    category="Productivity",
    tags=("meetings", "summary", "action-items"),
    ai_model="Claude",
    notes="Saves hours of follow-up time",
)

EMAIL_RESPONSE_TEMPLATE = PromptTemplate(
    title="Email Response",
    content=(
        "Draft a professional reply to this email:\n\n[Paste email]\n\n"
        "**My goal:** [Accept/Decline/Clarify/Follow up]\n**Tone:** [Formal/Friendly]\n\n"
        "Keep it concise and end with a clear next step."
    ),
    category="Productivity",
    tags=("email", "communication", "professional"),
    ai_model="Claude",
    notes="Useful for business communication",
)

PORTRAIT_TEMPLATE = PromptTemplate(
    title="Image Generation - Portrait",
    content=(
        "Professional portrait of [subject], soft natural lighting, shallow depth of field, "
        "85mm lens, neutral background, high detail, photorealistic --ar 4:5"
    ),
    category="Image Generation",
    tags=("portrait", "photography", "professional"),
    ai_model="Midjourney",
    notes="Adjust subject description for different portraits",
)

LANDSCAPE_TEMPLATE = PromptTemplate(
    title="Image Generation - Landscape",
    content=(
        "Breathtaking landscape of [location], golden hour, dramatic sky, "
        "wide angle, ultra detailed, vibrant colors"
    ),
    category="Image Generation",
    tags=("landscape", "photography", "nature"),
    ai_model="Stable Diffusion",
    notes="Great for scenic and nature images",
)

PROMPT_TEMPLATES: Tuple[PromptTemplate, ...] = (
    CODE_REVIEW_TEMPLATE,
    DEBUG_ASSISTANT_TEMPLATE,
    UNIT_TEST_TEMPLATE,
    BLOG_OUTLINE_TEMPLATE,
    TECHNICAL_DOCS_TEMPLATE,
    DATA_ANALYSIS_TEMPLATE,
    SWOT_TEMPLATE,
    STORY_OPENER_TEMPLATE,
    BRAINSTORM_TEMPLATE,
    MEETING_SUMMARY_TEMPLATE,
    EMAIL_RESPONSE_TEMPLATE,
    PORTRAIT_TEMPLATE,
    LANDSCAPE_TEMPLATE,
)


def find_template(title: str) -> Optional[PromptTemplate]:
    """Return the template whose title matches *title* case-insensitively."""
    key = title.strip().casefold()
    for template in PROMPT_TEMPLATES:
        if template.title.casefold() == key:
            return template
    return None


__all__ = ["PROMPT_TEMPLATES", "PromptTemplate", "find_template"]
