"""Prompt templates for CV generation and repository analysis."""

from langchain_core.prompts import PromptTemplate

CV_GENERATION_PROMPT = """You are a CV assistant that helps create professional CV data in JSON format.
Based on the following information from the user, create a complete CV data structure.

USER INPUT:
{text}

Please generate a JSON object that follows this TypeScript interface:

interface Project {{
  name: string;
  description: string;
  technologies: string[];
  github?: string;
  url?: string;
}}

interface Experience {{
  company: string;
  position: string;
  startDate: string;
  endDate: string;
  summary?: string;
  projects?: Project[];
}}

interface Education {{
  institution: string;
  degree: string;
  graduationDate: string;
  startDate?: string;
}}

interface CVData {{
  firstName: string;
  lastName: string;
  github?: string;
  email: string;
  phone?: string;
  linkedin?: string;
  about?: string;
  skills?: string[];
  languages?: Record<string, string>;
  education?: Education[];
  experience?: Experience[];
  projects?: Project[];
}}

Only respond with valid, well-structured JSON that matches this format.
Do not include any other text in your response.
For missing information, use reasonable defaults or leave those fields empty.
For dates, use formats like "June 2019" or "March 2022 - Present".
Wrap a skill in **double asterisks** only when the user marks it as a core strength."""


PROJECT_ANALYSIS_PROMPT = """I have a GitHub project with the following details:
- Name: {name}
- Description: {description}
- Languages detected: {languages}
{dependency_lines}
Here's the README content:
{readme}

Based on this information, please:
1. Write a concise but informative description of this project (2-3 sentences maximum)
2. Extract ONLY the most crucial technologies, frameworks, and tools used in this project

IMPORTANT GUIDELINES FOR TECHNOLOGIES:
- Focus ONLY on the main, core technologies that define the project's stack
- Include only major frameworks, languages, and platforms (e.g., React, Node.js, Django, TensorFlow)
- Limit the list to 3-8 most important technologies
- EXCLUDE minor packages and libraries like react-markdown, axios, lodash, etc.
- Exclude build tools and non-essential dev dependencies
- Normalize technology names using these conventions:
  * JavaScript (not "JS", "javascript", "js")
  * TypeScript (not "TS", "typescript", "ts")
  * React (not "ReactJS", "React.js")
  * Node.js (not "Node", "NodeJS", "nodejs")
  * Next.js (not "NextJS", "nextjs")
  * Express (not "ExpressJS", "Express.js")
  * PostgreSQL (not "Postgres")
  * MongoDB (not "Mongo")
  * HTML (not "HTML5")
  * CSS (not "CSS3")
  * Vue (not "Vue.js", "VueJS")
- First letter should be capitalized for all technologies

Return your response in this exact JSON format:
{{
  "description": "Your concise description here",
  "technologies": ["Tech1", "Tech2", "Tech3", ...]
}}

Provide only the JSON without any additional text. Make sure the technologies list is sorted alphabetically."""

# README text beyond this many characters is not sent to the model
README_LIMIT = 4000


def build_cv_prompt(text: str) -> str:
    """Prompt asking the model to turn free text into CV JSON."""
    return PromptTemplate.from_template(CV_GENERATION_PROMPT).format(text=text.strip())


def build_project_analysis_prompt(
    name: str,
    description: str | None,
    languages: list[str],
    readme: str,
    dependencies: dict[str, list[str]] | None = None,
    config_files: list[str] | None = None,
) -> str:
    """Prompt asking the model to describe a repository and name its core stack.

    Args:
        name: Repository name.
        description: Repository description, if any.
        languages: Languages GitHub detected.
        readme: README text; truncated to ``README_LIMIT`` characters.
        dependencies: Dependency names by kind (``dependencies``,
            ``devDependencies``, ``python``).
        config_files: Names of the config files the dependencies came from.
    """
    lines = []
    labels = {
        "dependencies": "Dependencies",
        "devDependencies": "DevDependencies",
        "python": "Python dependencies",
    }
    for kind, names in (dependencies or {}).items():
        if names:
            lines.append(f"- {labels.get(kind, kind)}: {', '.join(names)}")
    if config_files:
        lines.append(f"- Config files: {', '.join(config_files)}")

    return PromptTemplate.from_template(PROJECT_ANALYSIS_PROMPT).format(
        name=name,
        description=description or "No description provided",
        languages=", ".join(languages),
        dependency_lines="\n".join(lines) + "\n" if lines else "",
        readme=(readme or "No README found")[:README_LIMIT],
    )
