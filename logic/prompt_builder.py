from typing import Sequence

from errors import InputValidationError
from logging_bus import emit
from models import ArchitecturalStyle, Document, Preferences
from tokens import estimate_tokens

ANALYSIS_HEADER = "**Part 1: Best Practices & Novelty Analysis**"
SCRIPT_HEADER = "**Part 2: The Advanced Super Script**"

_INSTRUCTIONS = f"""As an expert Python developer and senior code architect, your task is to perform an in-depth analysis of the following Python files, taking into account the user's specific preferences for the final synthesized script. Your goal is to synthesize them into a single, cohesive, and advanced "super script" that represents the most robust and production-ready version possible.

{{preferences}}

Your response must be in two parts, clearly separated with Markdown.

{ANALYSIS_HEADER}

Review all the provided code and identify:
*   **Strengths**: Point out 2-3 examples of excellent coding practices (e.g., clean architecture, efficient algorithms, good documentation).
*   **Areas for Improvement**: Identify weaknesses such as non-compliance with PEP 8, potential bugs, security vulnerabilities, or inefficient code. Provide specific examples and suggest how to fix them.
*   **Novel & Useful Portions**: Explicitly identify any unique, clever, or particularly advanced algorithms, data structures, or techniques present in the code that should be preserved or enhanced in the final script.

{SCRIPT_HEADER}

Combine the functionalities from all provided files into a single, well-structured, production-grade Python script. This script must:
*   Be cohesive and logically organized, guided by the user's preferred **Architectural Style**.
*   Incorporate the user's specified **Essential Libraries** and meet their **Primary Objective**.
*   Be DRY (Don't Repeat Yourself) by eliminating redundant code.
*   Incorporate and potentially enhance the **novel and useful portions** identified in Part 1.
*   Consolidate all necessary imports at the top, adding type hinting for clarity and robustness.
*   Include a clear `if __name__ == "__main__":` entry point. If multiple execution paths exist, create a command-line interface (using `argparse`) to handle the different modes of operation.
*   Be documented according to the user's specified **Documentation Level**, with professional docstrings and insightful comments.
*   **CRITICAL REQUIREMENT**: The entire synthesized script must be presented within a single, runnable Python code block. Do not split the script into multiple files or multiple code blocks.

Here is the code to analyze:
{{code}}"""


def format_documents(documents: Sequence[Document]) -> str:
    return '\n\n'.join(f"--- FILE: {doc.name} ---\n\n{doc.content}" for doc in documents)


def format_preferences(preferences: Preferences) -> str:
    if preferences.architecture == ArchitecturalStyle.AUTO:
        architecture = 'Determine the best style based on the code'
    else:
        architecture = preferences.architecture.value
    libraries = preferences.libraries.strip() or 'User did not specify any.'
    return (
        "**User Preferences for Synthesis**\n"
        f"*   **Primary Objective**: {preferences.objective.strip()}\n"
        f"*   **Essential Libraries**: {libraries}\n"
        f"*   **Documentation Level**: {preferences.documentation.value}\n"
        f"*   **Architectural Style**: {architecture}"
    )


def build_analysis_prompt(documents: Sequence[Document], preferences: Preferences) -> str:
    """Assemble the analysis request from the uploaded files and questionnaire answers."""
    if not documents:
        raise InputValidationError("Please upload at least one Python file to review.")
    prompt = _INSTRUCTIONS.format(
        preferences=format_preferences(preferences),
        code=format_documents(documents),
    )
    emit('INFO', 'BUILD', 'Built analysis prompt', files=len(documents), chars=len(prompt))
    return prompt


def estimate_prompt_tokens(documents: Sequence[Document], preferences: Preferences, model: str) -> int:
    tokens = estimate_tokens(build_analysis_prompt(documents, preferences), model)
    emit('INFO', 'BUILD', 'Estimated prompt size', model=model, tokens=tokens)
    return tokens


__all__ = [
    'build_analysis_prompt',
    'estimate_prompt_tokens',
    'format_documents',
    'format_preferences',
    'ANALYSIS_HEADER',
    'SCRIPT_HEADER',
]
