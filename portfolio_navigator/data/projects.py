from __future__ import annotations

from dataclasses import dataclass

PROJECT_CATEGORIES: tuple[str, ...] = (
    "Enterprise",
    "E-commerce",
    "Agency Work",
    "Social Media",
    "Open Source",
    "Media Platform",
    "Blog",
)


@dataclass(frozen=True)
class Project:
    name: str
    kind: str  # showcase | detailed | blog
    category: str
    technologies: tuple[str, ...]
    description: str
    images: tuple[str, ...] = ()
    source_url: str = ""
    live_url: str = ""
    href: str = ""
    favicon: str = ""


PROJECT_SHOWCASE: tuple[Project, ...] = (
    Project(
        name="EarthLink",
        kind="showcase",
        category="Enterprise",
        technologies=(
            "ReactJS", "Nextjs", "Styled Components", "Scss", "GraphQL", "Microservices",
            "Payment Gateway",
        ),
        description="Showcase project: EarthLink",
        images=("/images/projects/earthlink2.png",),
        href="/projects",
    ),
    Project(
        name="Rapid Store",
        kind="showcase",
        category="E-commerce",
        technologies=(
            "Razorpay-payment-integration", "Auth", "ReactJS", "Rapid-UI", "Context API",
            "UseReducer",
        ),
        description="Showcase project: Rapid Store",
        images=("/images/projects/store.png",),
        href="/projects",
    ),
    Project(
        name="Rapid Fire",
        kind="showcase",
        category="Social Media",
        technologies=("ReactJS", "Redux-Toolkit", "RapidUI", "DarkMode"),
        description="Showcase project: Rapid Fire",
        images=("/images/projects/fire.png",),
        href="/projects",
    ),
)

PROJECTS: tuple[Project, ...] = (
    Project(
        name="EarthLink",
        kind="detailed",
        category="Enterprise",
        technologies=("ReactJS", "Nextjs", "GraphQL", "Microservices"),
        description=(
            "Customer portal for a large internet service provider, built as "
            "GraphQL-backed micro frontends."
        ),
        images=(
            "/images/projects/earthlink3.png",
            "/images/projects/earthlink2.png",
            "/images/projects/earthlink.png",
        ),
        favicon="🌍",
    ),
    Project(
        name="Rapid Store",
        kind="detailed",
        category="E-commerce",
        technologies=("ReactJS", "Context API", "Razorpay-payment-integration"),
        description=(
            "E-commerce platform for electronics and gadgets with cart, wishlist "
            "and payment integration."
        ),
        images=("/images/projects/store.png", "/images/projects/store2.png"),
        favicon="💻",
    ),
    Project(
        name="Agency landing site",
        kind="detailed",
        category="Agency Work",
        technologies=("ReactJS", "GraphQL"),
        description=(
            "Pixel-perfect landing page with an integrated chatbot and GraphQL-backed content."
        ),
        images=("/images/projects/dml.png",),
        favicon="📢",
    ),
    Project(
        name="Rapid Fire (Social Media app)",
        kind="detailed",
        category="Social Media",
        technologies=("ReactJS", "Redux-Toolkit", "Firebase"),
        description="Share moments, connect, know the world.",
        images=("/images/projects/fire1.png", "/images/projects/fire.png"),
        favicon="🐤",
    ),
    Project(
        name="Rapid UI",
        kind="detailed",
        category="Open Source",
        technologies=("CSS", "Scss", "JavaScript"),
        description=(
            "Open source CSS library with predefined styled classes and utilities "
            "for building websites quickly."
        ),
        images=("/images/projects/rapidui1.png", "/images/projects/rapidui.png"),
        favicon="🎨",
    ),
    Project(
        name="Rapid TV",
        kind="detailed",
        category="Media Platform",
        technologies=("ReactJS", "Context API", "UseReducer"),
        description=(
            "Video library for tech enthusiasts: gadget launches, product reviews and tech news."
        ),
        images=("/images/projects/tv.png", "/images/projects/tv1.png"),
        favicon="📺",
    ),
)

BLOGS: tuple[Project, ...] = (
    Project(
        name="Understand Debouncing and Throttling in JavaScript with examples",
        kind="blog",
        category="Blog",
        technologies=("JavaScript",),
        description="Debouncing and throttling explained, with their effect on site performance.",
        images=("/images/projects/debounce.png",),
        favicon="📝",
    ),
    Project(
        name="How to create your own custom Hooks in React",
        kind="blog",
        category="Blog",
        technologies=("ReactJS", "JavaScript"),
        description="Extracting shared component logic into reusable custom hooks.",
        images=("/images/projects/hooks.png",),
        favicon="✍",
    ),
    Project(
        name="map, filter, reduce functions in JavaScript made easy",
        kind="blog",
        category="Blog",
        technologies=("JavaScript",),
        description="The three array workhorses explained through worked examples.",
        images=("/images/projects/filter.png",),
        favicon="✍",
    ),
)
