"""
Structured portfolio facts.

The site owner's profile, experience, services, pricing, projects, skills,
testimonials, FAQ, statistics and contact details as typed records. This is
the only knowledge the assistant is allowed to answer from.

Dependencies: pydantic
System role: Authoritative fact set fed to the content extractor
"""

from pydantic import BaseModel, Field


class Profile(BaseModel):
    name: str
    role: str
    location: str
    summary: str
    specializations: list[str]
    availability: str
    background: str
    aliases: list[str] = Field(default_factory=list)


class Statistic(BaseModel):
    title: str
    value: int


class ExperienceEntry(BaseModel):
    id: int
    period: str
    title: str
    company: str
    label: str
    description: str
    link: str = ""


class StackItem(BaseModel):
    id: int
    title: str
    description: str
    link: str


class Service(BaseModel):
    id: int
    title: str
    description: str


class ServicePlan(BaseModel):
    id: int
    service: str
    price: str = Field(description="Hourly rate as displayed, e.g. '$40+'")
    description: str
    completed_works: str
    experience: str
    total_hours_worked: str
    link: str


class ShowCase(BaseModel):
    id: int
    title: str
    description: str
    link: str
    type: str
    theme: str
    pages: int


class Testimonial(BaseModel):
    id: int
    name: str
    location: str
    feedback: str


class FaqEntry(BaseModel):
    question: str
    answer: str


class ContactDetails(BaseModel):
    name: str
    email: str
    phone: str
    freelance_platforms: dict[str, str]
    social: dict[str, str]
    scheduling: str
    business_location: str
    availability: str
    how_to_hire: str


class PortfolioFacts(BaseModel):
    """Every fact family the extractor knows how to transform."""

    profile: Profile
    statistics: list[Statistic] = Field(default_factory=list)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    stack: list[StackItem] = Field(default_factory=list)
    services: list[Service] = Field(default_factory=list)
    service_plans: list[ServicePlan] = Field(default_factory=list)
    showcases: list[ShowCase] = Field(default_factory=list)
    testimonials: list[Testimonial] = Field(default_factory=list)
    faq: list[FaqEntry] = Field(default_factory=list)
    contact: ContactDetails | None = None


_UPWORK = "https://www.upwork.com/freelancers/aasimshah"

DEFAULT_FACTS = PortfolioFacts(
    profile=Profile(
        name="Syed Aasim Shah",
        role="Senior MERN Stack Developer / Full-Stack Developer",
        location="Rawalpindi, Pakistan",
        summary=(
            "I craft high-performance web apps, seamless APIs, and dynamic full-stack "
            "solutions, turning ideas into reality!"
        ),
        specializations=[
            "MERN Stack Development (MongoDB, Express, React, Node.js)",
            "API Development (RESTful and GraphQL)",
            "Cloud & DevOps (AWS, Docker, CI/CD)",
            "Complete Project Development (Website, Admin Dashboard, Mobile Apps)",
        ],
        availability="Available for work",
        background=(
            "Experienced developer with 5+ years of expertise in building scalable web "
            "applications, APIs, and cloud-based solutions."
        ),
        aliases=["Aasim Shah"],
    ),
    statistics=[
        Statistic(title="Happy Clients", value=45),
        Statistic(title="Year of Experience", value=5),
        Statistic(title="Completed Projects", value=40),
    ],
    experience=[
        ExperienceEntry(
            id=1,
            period="2024 - Present",
            title="Senior MERN Stack Developer",
            company="Dcodax PVT LTD",
            label="Tech Firm",
            description=(
                "Developing scalable APIs for a multi-vendor hotel management system, "
                "integrating third-party services, and optimizing performance."
            ),
            link="dcodax.com",
        ),
        ExperienceEntry(
            id=2,
            period="2022 - 2024",
            title="MERN Stack Developer (Backend)",
            company="ItecExperts",
            label="Software House",
            description=(
                "Built and optimized backend systems for multiple web and cross-platform "
                "applications, ensuring high performance and security."
            ),
            link="itecexperts.com",
        ),
        ExperienceEntry(
            id=3,
            period="2020 - 2022",
            title="Backend Developer",
            company="47apps",
            label="Software House",
            description=(
                "Developed and maintained backend systems for a variety of web applications, "
                "including e-commerce platforms and content management systems."
            ),
        ),
    ],
    stack=[
        StackItem(id=1, title="Next.js", description="Full-Stack React Framework", link="https://nextjs.org"),
        StackItem(id=2, title="Node.js", description="JavaScript Runtime", link="https://nodejs.org"),
        StackItem(id=3, title="Express.js", description="Fast Node.js Framework", link="https://expressjs.com"),
        StackItem(id=4, title="Fastify", description="High-Performance Backend", link="https://www.fastify.io"),
        StackItem(id=5, title="MongoDB", description="NoSQL Database", link="https://www.mongodb.com"),
        StackItem(id=6, title="PostgreSQL", description="Relational Database", link="https://www.postgresql.org"),
        StackItem(id=7, title="Docker", description="Containerization Platform", link="https://www.docker.com"),
        StackItem(id=8, title="TypeScript", description="Strongly Typed JavaScript", link="https://www.typescriptlang.org"),
        StackItem(id=9, title="GraphQL", description="API Query Language", link="https://graphql.org"),
        StackItem(
            id=10,
            title="CI/CD",
            description="Continuous Integration & Deployment",
            link="https://about.gitlab.com/topics/ci-cd",
        ),
    ],
    services=[
        Service(
            id=1,
            title="MERN Stack Development",
            description=(
                "Building scalable and high-performance web applications using MongoDB, "
                "Express, React, and Node.js."
            ),
        ),
        Service(
            id=2,
            title="API Development",
            description="Designing and developing RESTful and GraphQL APIs for seamless data communication.",
        ),
        Service(
            id=3,
            title="Cloud & DevOps",
            description="Deploying and managing cloud-based applications with CI/CD pipelines, Docker, and AWS.",
        ),
        Service(
            id=4,
            title="Complete Project Development",
            description=(
                "End-to-end development including website, admin dashboard, cross-platform "
                "mobile app in Flutter, and AWS deployment."
            ),
        ),
    ],
    service_plans=[
        ServicePlan(
            id=1,
            service="MERN Stack Development",
            price="$30",
            description=(
                "Building scalable and high-performance web applications using MongoDB, "
                "Express, React, and Node.js."
            ),
            completed_works="50+",
            experience="5+ years",
            total_hours_worked="1500+ hours",
            link=_UPWORK,
        ),
        ServicePlan(
            id=2,
            service="API Development",
            price="$40+",
            description="Designing and developing RESTful and GraphQL APIs for seamless data communication.",
            completed_works="40+",
            experience="5+ years",
            total_hours_worked="1200+ hours",
            link=_UPWORK,
        ),
        ServicePlan(
            id=3,
            service="Cloud & DevOps",
            price="$80+",
            description="Deploying and managing cloud-based applications with CI/CD pipelines, Docker, and AWS.",
            completed_works="25+",
            experience="2+ years",
            total_hours_worked="900+ hours",
            link=_UPWORK,
        ),
        ServicePlan(
            id=4,
            service="Complete Project Development",
            price="$30+",
            description=(
                "End-to-end development including website, admin dashboard, cross-platform "
                "mobile app in Flutter, and AWS deployment."
            ),
            completed_works="20+",
            experience="5+ years",
            total_hours_worked="2000+ hours",
            link=_UPWORK,
        ),
    ],
    showcases=[
        ShowCase(
            id=1,
            title="HOHEAL",
            description=(
                "A SaaS-based multi-vendor hotel management system with admin, hotel, "
                "management, and staff panels."
            ),
            link="http://172.86.108.103:4000/en",
            type="SaaS",
            theme="Light",
            pages=30,
        ),
        ShowCase(
            id=2,
            title="PIKUP POS",
            description=(
                "A full-fledged e-commerce website with a custom admin panel, order "
                "management, and payment gateway integration."
            ),
            link="https://pikuppos.hostdonor.com/",
            type="E-Commerce",
            theme="Dark",
            pages=80,
        ),
        ShowCase(
            id=3,
            title="Premier Vehicles",
            description=(
                "A Flutter app with an admin panel where users can list and sell their "
                "vehicles, including integrated payment options."
            ),
            link="github.com/aasim-shah/premier_dashboard",
            type="Marketplace",
            theme="Dark",
            pages=20,
        ),
        ShowCase(
            id=4,
            title="Cloud-Based API Services",
            description=(
                "A scalable backend solution with RESTful & GraphQL APIs, authentication, "
                "and AWS deployment."
            ),
            link="https://api.myservice.com",
            type="Backend",
            theme="Light",
            pages=10,
        ),
    ],
    testimonials=[
        Testimonial(
            id=1,
            name="Sarah Thompson",
            location="New York City, USA.",
            feedback=(
                "The MERN stack web application Syed built for my business is top-notch! "
                "It's fast, scalable, and has completely streamlined our operations."
            ),
        ),
        Testimonial(
            id=2,
            name="John Anderson",
            location="Sydney, Australia.",
            feedback=(
                "Syed's API development skills are outstanding! He designed a seamless and "
                "efficient RESTful API for our mobile and web apps, making integrations smooth."
            ),
        ),
        Testimonial(
            id=3,
            name="Mark Davis",
            location="London, UK.",
            feedback=(
                "From backend optimization to cloud deployment, Syed handled our entire "
                "project flawlessly. Our platform is now running with excellent performance on AWS."
            ),
        ),
        Testimonial(
            id=4,
            name="Laura Adams",
            location="Madrid, Spain.",
            feedback=(
                "Syed delivered a full-stack solution, including a responsive website, an admin "
                "dashboard, and a cross-platform Flutter app. The end-to-end development was "
                "executed perfectly!"
            ),
        ),
    ],
    faq=[
        FaqEntry(
            question="Can you work with clients remotely?",
            answer=(
                "Absolutely! I have experience working with clients from all around the world. "
                "Through effective communication channels such as email, video calls, and project "
                "management tools, I ensure seamless collaboration regardless of geographical location."
            ),
        ),
        FaqEntry(
            question="Will my website be mobile-friendly?",
            answer=(
                "Absolutely! Mobile responsiveness is a top priority in today's digital landscape. "
                "I design and develop websites that are fully responsive and adaptable to various "
                "devices and screen sizes. Your website will provide an optimal user experience "
                "whether accessed via desktops, smartphones, or tablets."
            ),
        ),
        FaqEntry(
            question="How long does it typically take to complete a project?",
            answer=(
                "The timeline for each project varies depending on its scope and complexity. "
                "Factors such as the number of pages, functionalities, and the client feedback "
                "process can impact the timeline. Upon discussing your project requirements, I will "
                "provide you with a realistic timeline and keep you updated throughout the process."
            ),
        ),
        FaqEntry(
            question="Can you integrate third-party tools into my website?",
            answer=(
                "Yes, I have experience integrating various third-party tools, plugins, and "
                "platforms into websites. Whether you need to integrate e-commerce functionalities, "
                "social media integration, email marketing services, or anything else, I can "
                "recommend and help ensure smooth integration."
            ),
        ),
        FaqEntry(
            question="Do you offer website maintenance?",
            answer=(
                "Yes, I offer website maintenance services to ensure your website remains up to "
                "date, secure, and optimized. From performance updates to adding new features and "
                "content, I can provide ongoing support to keep your website running smoothly."
            ),
        ),
        FaqEntry(
            question="How do you handle website revisions?",
            answer=(
                "I value your input and collaboration throughout the design process. Upon "
                "completing an initial design, I encourage you to provide feedback. I incorporate "
                "your suggestions and revisions to ensure the final product aligns with your vision."
            ),
        ),
        FaqEntry(
            question="Can you optimize my website?",
            answer=(
                "Certainly! I incorporate search engine optimization (SEO) best practices into my "
                "development process. This includes using relevant keywords, optimizing meta tags, "
                "creating search-engine-friendly URLs, and ensuring your website has a solid "
                "foundation for better search engine visibility."
            ),
        ),
        FaqEntry(
            question="What are your payment terms?",
            answer=(
                "Payment terms may vary depending on the project scope and duration. Generally, "
                "I request an initial deposit before commencing work."
            ),
        ),
    ],
    contact=ContactDetails(
        name="Syed Aasim Shah",
        email="contact@aasimshah.com",
        phone="+92-348-3360070",
        freelance_platforms={
            "Upwork": _UPWORK,
            "Fiverr": "https://www.fiverr.com/users/aaasimmshah",
        },
        social={
            "GitHub": "https://www.github.com/aasim-shah",
            "LinkedIn": "Available on the website",
            "Twitter": "@aasimshah",
            "Instagram": "@aasimshah",
        },
        scheduling="You can schedule a 15-minute call via Cal.com integration on the website.",
        business_location="Bahria Town Phase 7, Rawalpindi, Pakistan",
        availability="Available for work and new projects",
        how_to_hire=(
            "You can reach out via email, phone, or through Upwork/Fiverr for project "
            "inquiries and collaborations."
        ),
    ),
)
