from typing import Optional

generate_test_cases = """
You are an expert Test Case Generator AI.
Your task is to generate a comprehensive set of diverse test cases for the following code snippet.

{language_hint}

**Instructions for Test Case Generation:**

1.  **Analyze the Code:** Understand its purpose, inputs, outputs, and potential logic branches.
2.  **Identify Test Categories:** Generate tests covering these categories:
    *   **Positive Cases:** Valid inputs that should produce expected successful outcomes.
    *   **Negative Cases:** Invalid inputs (wrong type, format, out of range) designed to test error handling or specific failure paths.
    *   **Edge Cases:** Boundary values (min/max), empty inputs (empty strings, empty arrays, nulls, undefined where applicable), zero values, very large/small numbers, etc.
    *   **(Optional) Performance Cases:** If relevant, suggest tests with large inputs to check for performance issues (though you won't execute them).
3.  **Format the Output Clearly:** Use Markdown for readability. Structure the tests logically (e.g., grouped by category). For each test case, clearly state:
    *   The **Input(s)**.
    *   The **Expected Output** or **Expected Behavior** (e.g., "throws TypeError", "returns empty array").
    *   (Optional) A brief **Description/Purpose** of the test case.

**Code Snippet to Analyze:**
```{fence_tag}
{code}
```

**Generated Test Cases:**
"""

LANGUAGE_HINT = "The code is written in {language}. "
LANGUAGE_NOT_SPECIFIED = "The code language is not specified. "


def normalize_language(language: Optional[str]) -> Optional[str]:
    if language is None:
        return None
    language = language.strip()
    return language or None


def language_hint(language: Optional[str]) -> str:
    language = normalize_language(language)
    if language:
        return LANGUAGE_HINT.format(language=language)
    return LANGUAGE_NOT_SPECIFIED


def build_test_prompt(code: str, language: Optional[str] = None) -> str:
    """Fills the test-generation template. The code is embedded verbatim."""
    language = normalize_language(language)
    return generate_test_cases.format(
        language_hint=language_hint(language),
        fence_tag=language or "",
        code=code,
    )
