from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Experience:
    title: str
    company: str
    company_url: str
    date: str  # "May 2023 - July 2023"; an open role ends with "Present"
    description: str


EXPERIENCE: tuple[Experience, ...] = (
    Experience(
        title="Full Stack Developer (Apprenticeship)",
        company="Central Electricity Authority of India",
        company_url="https://cea.nic.in/?lang=en",
        date="May 2023 - July 2023",
        description=(
            "I enhanced data accuracy by 34% on a Renewable Dashboard that monitors over "
            "150 power stations by integrating it with the National Power Portal using "
            "Spring Boot (Java). I developed a server file management system using PHP and "
            "MySQL with role-based access control, optimizing storage for over 5,000 files "
            "and reducing retrieval time by 25%. I built a MERN-based Conference Room "
            "Booking System that reduced booking time by 60% across 10+ rooms."
        ),
    ),
    Experience(
        title="Full Stack/A.I. Developer (Apprenticeship)",
        company="Xansr Media",
        company_url="https://www.xansrmedia.com/",
        date="June 2024 - Present",
        description=(
            "I developed microservice APIs using Node.js (TypeScript) and FastAPI, applying "
            "test-driven development and improving performance by 36%. I implemented CI/CD "
            "pipelines using Docker, Azure and GitHub Actions, boosting deployment efficiency "
            "by 42%. I led the development of a trivia and chatbot proof of concept with "
            "Next.js, FastAPI and OpenAI that increased user engagement by 35%. I built a "
            "sports media assistant delivering real-time voice and text interactions during "
            "live matches, showcased to over 500 attendees."
        ),
    ),
)
