from __future__ import annotations

from dataclasses import dataclass

PROFICIENCY_LEVELS: tuple[str, ...] = ("beginner", "intermediate", "advanced", "expert")


@dataclass(frozen=True)
class Skill:
    name: str
    icon: str


@dataclass(frozen=True)
class SkillSection:
    name: str
    skills: tuple[Skill, ...]


def _skills(*pairs: tuple[str, str]) -> tuple[Skill, ...]:
    return tuple(Skill(name=name, icon=f"/icons/{icon}.svg") for name, icon in pairs)


SKILL_SECTIONS: tuple[SkillSection, ...] = (
    SkillSection(
        name="Fullstack & Databases",
        skills=_skills(
            ("React", "reactjs"),
            ("Nextjs", "nextjs"),
            ("Nodejs", "nodejs"),
            ("Express", "express"),
            ("FastAPI", "fastapi"),
            ("Tailwindcss", "tailwindcss"),
            ("Spring Boot", "springboot"),
            ("Flutter", "flutter"),
            ("Auth0", "auth0"),
            ("MongoDB", "mongodb"),
            ("MySql", "mysql"),
            ("Firebase", "firebase"),
        ),
    ),
    SkillSection(
        name="AI/ML",
        skills=_skills(
            ("OpenAI", "openai"),
            ("Azure AI", "azureai"),
            ("Vercel AI SDK", "vercel"),
            ("LLaMa AI", "llama"),
            ("Prompt Engineering", "prompt"),
            ("LangChain", "langchain"),
        ),
    ),
    SkillSection(
        name="DevOps",
        skills=_skills(
            ("CI/CD", "cicd"),
            ("Docker", "docker"),
            ("GitHub Actions", "actions"),
            ("API Gateway", "api-management"),
            ("Kubernetes", "kubernetes"),
            ("Jenkins", "jenkins"),
        ),
    ),
    SkillSection(
        name="Tools & Cloud Platforms",
        skills=_skills(
            ("Git", "git"),
            ("Github", "github"),
            ("Azure DevOps", "devops"),
            ("Jira", "jira"),
            ("Npm", "npm"),
            ("Postman", "postman"),
            ("Swagger", "swagger"),
            ("Microsoft Azure", "azure"),
            ("Vercel", "vercel"),
            ("Raspberry PI", "pi"),
            ("Arduino", "arduino"),
        ),
    ),
    SkillSection(
        name="Languages",
        skills=_skills(
            ("Javascript", "javascript"),
            ("Typescript", "typescript"),
            ("Java", "java"),
            ("Dart", "dart"),
            ("PHP", "php"),
            ("Python", "python"),
        ),
    ),
)

SKILL_CATEGORIES: tuple[str, ...] = tuple(section.name for section in SKILL_SECTIONS)

SKILL_ALIASES: dict[str, tuple[str, ...]] = {
    "React": ("ReactJS", "React.js"),
    "Nextjs": ("Next.js", "NextJS"),
    "Nodejs": ("Node.js", "NodeJS"),
    "Javascript": ("JS", "ECMAScript"),
    "Typescript": ("TS",),
    "MongoDB": ("Mongo",),
    "MySql": ("MySQL", "My SQL"),
    "FastAPI": ("Fast API",),
    "Spring Boot": ("SpringBoot",),
    "OpenAI": ("GPT", "ChatGPT"),
    "Azure AI": ("Azure Cognitive Services",),
    "LLaMa AI": ("LLaMA", "Meta AI"),
    "LangChain": ("Lang Chain",),
    "CI/CD": ("Continuous Integration", "Continuous Deployment"),
    "GitHub Actions": ("Github Actions",),
    "API Gateway": ("APIM", "API Management"),
    "Microsoft Azure": ("Azure", "MS Azure"),
    "Azure DevOps": ("ADO", "VSTS"),
}

EXPERT_SKILLS = frozenset({
    "React", "Javascript", "Typescript", "Nodejs", "Python", "Java",
    "FastAPI", "Spring Boot", "MongoDB", "MySql", "Git", "Github",
})
ADVANCED_SKILLS = frozenset({
    "Nextjs", "Express", "Tailwindcss", "Docker", "CI/CD", "Microsoft Azure",
    "OpenAI", "LangChain", "Postman", "Jira",
})

RELATED_SKILLS: dict[str, tuple[str, ...]] = {
    "React": ("Nextjs", "Javascript", "Typescript", "Tailwindcss"),
    "Nextjs": ("React", "Nodejs", "Vercel"),
    "Nodejs": ("Express", "Javascript", "MongoDB", "FastAPI"),
    "Python": ("FastAPI", "LangChain", "OpenAI", "Azure AI"),
    "Java": ("Spring Boot", "MySql", "Jenkins"),
    "Docker": ("Kubernetes", "CI/CD", "Microsoft Azure"),
    "MongoDB": ("Nodejs", "Express"),
    "OpenAI": ("LangChain", "Python", "Azure AI"),
    "Microsoft Azure": ("Azure DevOps", "Azure AI", "Docker"),
    "Git": ("Github", "GitHub Actions", "CI/CD"),
}

TOP_SKILLS_ORDER: tuple[str, ...] = (
    "React", "Javascript", "Typescript", "Nodejs", "Python", "Java",
    "Nextjs", "FastAPI", "Spring Boot", "MongoDB", "Docker", "Microsoft Azure",
)


def proficiency_of(skill_name: str) -> str:
    """Proficiency inferred from how central a skill is; unlisted skills are intermediate."""
    if skill_name in EXPERT_SKILLS:
        return "expert"
    if skill_name in ADVANCED_SKILLS:
        return "advanced"
    return "intermediate"
