"""
Category and date pickers.

The pickers shown by the selection tools answer by submitting a new user
turn; the helpers here build those follow-up messages so every host
phrases them the same way.
"""

from datetime import date

CATEGORY_CATALOG: dict[str, list[str]] = {
    "Computer Science": [
        "Artificial Intelligence",
        "Computation and Language",
        "Computational Complexity",
        "Computational Engineering, Finance, and Science",
        "Computational Geometry",
        "Computer Science and Game Theory",
        "Computer Vision and Pattern Recognition",
        "Computers and Society",
        "Cryptography and Security",
        "Data Structures and Algorithms",
        "Databases",
        "Digital Libraries",
        "Discrete Mathematics",
        "Distributed, Parallel, and Cluster Computing",
        "Emerging Technologies",
        "Formal Languages and Automata Theory",
        "Graphics",
        "Hardware Architecture",
        "Human-Computer Interaction",
        "Information Retrieval",
        "Information Theory",
        "Logic in Computer Science",
        "Machine Learning",
        "Mathematical Software",
        "Multiagent Systems",
        "Multimedia",
        "Networking and Internet Architecture",
        "Neural and Evolutionary Computing",
        "Numerical Analysis",
        "Operating Systems",
        "Performance",
        "Programming Languages",
        "Robotics",
        "Social and Information Networks",
        "Software Engineering",
        "Sound",
        "Symbolic Computation",
        "Systems and Control",
    ],
    "Mathematics": [
        "Algebraic Geometry",
        "Algebraic Topology",
        "Analysis of PDEs",
        "Category Theory",
        "Classical Analysis and ODEs",
        "Combinatorics",
        "Commutative Algebra",
        "Complex Variables",
        "Differential Geometry",
        "Dynamical Systems",
        "Functional Analysis",
        "General Mathematics",
        "General Topology",
        "Geometric Topology",
        "Group Theory",
        "History and Overview",
        "K-Theory and Homology",
        "Logic",
        "Mathematical Physics",
        "Metric Geometry",
        "Number Theory",
        "Numerical Analysis",
        "Operator Algebras",
        "Optimization and Control",
        "Probability",
        "Quantum Algebra",
        "Representation Theory",
        "Rings and Algebras",
        "Spectral Theory",
        "Statistics Theory",
        "Symplectic Geometry",
    ],
    "Physics": [
        "Accelerator Physics",
        "Applied Physics",
        "Atmospheric and Oceanic Physics",
        "Atomic and Molecular Clusters",
        "Atomic Physics",
        "Biological Physics",
        "Chemical Physics",
        "Classical Physics",
        "Computational Physics",
        "Data Analysis, Statistics and Probability",
        "Fluid Dynamics",
        "General Physics",
        "Geophysics",
        "History and Philosophy of Physics",
        "Instrumentation and Detectors",
        "Medical Physics",
        "Optics",
        "Physics and Society",
        "Physics Education",
        "Plasma Physics",
        "Popular Physics",
        "Space Physics",
    ],
}

DATE_RANGES = [
    "last 3 months",
    "last 6 months",
    "last 1 year",
    "last 2 years",
]

_RANGE_MONTHS = {
    "last 3 months": 3,
    "last 6 months": 6,
    "last 1 year": 12,
    "last 2 years": 24,
}


def calculate_past_date(range_name: str, today: date | None = None) -> str:
    """
    Start of a predefined range as year-month.

    Args:
        range_name: One of DATE_RANGES
        today: Reference day (defaults to today)

    Returns:
        "YYYY-MM" for known ranges, "YYYY-MM-DD" of today otherwise
    """
    today = today or date.today()
    months = _RANGE_MONTHS.get(range_name)
    if months is None:
        return today.strftime("%Y-%m-%d")

    total = today.year * 12 + (today.month - 1) - months
    return f"{total // 12:04d}-{total % 12 + 1:02d}"


def filter_categories(categories: list[str], selected: list[str], text: str = "") -> list[str]:
    """Categories still selectable whose name contains ``text`` (case-insensitive)."""
    needle = text.lower()
    return [c for c in categories if c not in selected and needle in c.lower()]


def category_selection_query(selected: list[str]) -> str:
    return (
        f"the selected category is {','.join(selected)}, "
        "now call the show_date_range_selection function to ask for date"
    )


def date_selection_query(selected_date: str) -> str:
    return f"the selected date is {selected_date}, now display the research papers"
