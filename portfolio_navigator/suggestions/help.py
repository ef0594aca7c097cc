from __future__ import annotations

from dataclasses import dataclass, field

from portfolio_navigator.constants import DEFAULT_PAGE


@dataclass(frozen=True)
class ContextualHelp:
    page_description: str
    available_actions: list[str] = field(default_factory=list)
    suggested_questions: list[str] = field(default_factory=list)
    navigation_suggestions: list[str] = field(default_factory=list)


PAGE_HELP: dict[str, ContextualHelp] = {
    "home": ContextualHelp(
        page_description=(
            "Welcome to the portfolio homepage. Get an overview of skills, "
            "experience, and featured projects."
        ),
        available_actions=[
            "Navigate to different sections",
            "View featured projects",
            "Check skills overview",
            "Switch theme",
            "Open contact form",
        ],
        suggested_questions=[
            "What are your main skills?",
            "Show me your recent projects",
            "Tell me about your experience",
            "How can I contact you?",
            "Can I download your resume?",
        ],
        navigation_suggestions=[
            "Go to About page for detailed background",
            "Visit Projects page for portfolio",
            "Check Resume page for downloadable CV",
            "Open Contact form to get in touch",
        ],
    ),
    "about": ContextualHelp(
        page_description=(
            "Learn about the professional background, experience, and skills in detail."
        ),
        available_actions=[
            "View detailed experience",
            "Explore skills by category",
            "Navigate to specific sections",
            "Download resume",
            "Contact for opportunities",
        ],
        suggested_questions=[
            "What's your work experience?",
            "What technologies do you work with?",
            "Tell me about your education",
            "What are your achievements?",
            "Show me your career progression",
        ],
        navigation_suggestions=[
            "View Projects to see work samples",
            "Download Resume for detailed CV",
            "Open Contact form for inquiries",
            "Return to Home for overview",
        ],
    ),
    "projects": ContextualHelp(
        page_description=(
            "Explore the portfolio of projects across different technologies and domains."
        ),
        available_actions=[
            "Filter projects by technology",
            "View project details",
            "Open project demos",
            "Navigate to source code",
            "Contact about projects",
        ],
        suggested_questions=[
            "Show me React projects",
            "What AI projects have you built?",
            "Tell me about your web applications",
            "Which project are you most proud of?",
            "Can I see the source code?",
        ],
        navigation_suggestions=[
            "Go to About for technical background",
            "Check Resume for project summaries",
            "Open Contact to discuss projects",
            "Return to Home for overview",
        ],
    ),
    "resume": ContextualHelp(
        page_description=(
            "View and download the professional resume with detailed "
            "qualifications and experience."
        ),
        available_actions=[
            "Download PDF resume",
            "View online version",
            "Navigate to detailed sections",
            "Contact for opportunities",
            "Switch viewing theme",
        ],
        suggested_questions=[
            "Can I download your resume?",
            "What's your latest experience?",
            "Tell me about your qualifications",
            "What's your contact information?",
            "Are you available for work?",
        ],
        navigation_suggestions=[
            "Visit About for detailed background",
            "Check Projects for work samples",
            "Open Contact form for opportunities",
            "Return to Home for overview",
        ],
    ),
    "contact": ContextualHelp(
        page_description="Get in touch for opportunities, collaborations, or inquiries.",
        available_actions=[
            "Send a message",
            "View contact information",
            "Connect on social platforms",
            "Schedule a call",
            "Download resume",
        ],
        suggested_questions=[
            "How can I contact you?",
            "What's your email address?",
            "Are you available for work?",
            "Can we schedule a call?",
            "How do I connect on LinkedIn?",
        ],
        navigation_suggestions=[
            "View About for background",
            "Check Projects for work samples",
            "Download Resume for qualifications",
            "Return to Home for overview",
        ],
    ),
}


def help_for_page(page: str) -> ContextualHelp:
    """Canned help for a page; unmapped pages get the home entry."""
    return PAGE_HELP.get(page.lower(), PAGE_HELP[DEFAULT_PAGE])
