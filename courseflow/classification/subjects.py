"""Static subject keyword tables.

Each entry maps course-name triggers to keywords that hint at that subject.
The filename table is short and matched by substring; the content table is
richer and matched on word boundaries in extracted text.
"""

FILENAME_SUBJECT_KEYWORDS: list[tuple[tuple[str, ...], tuple[str, ...]]] = [
    (
        ("computer", "programming", "software"),
        ("code", "program", "algorithm", "data", "structure", "software", "development", "cs"),
    ),
    (
        ("math", "calculus", "algebra"),
        ("equation", "proof", "theorem", "formula", "problem", "solution", "math"),
    ),
    (("physics",), ("force", "energy", "motion", "quantum", "mechanics", "physics", "lab")),
    (("chemistry", "chem"), ("molecule", "reaction", "compound", "element", "lab", "chem")),
    (("biology", "bio"), ("cell", "organism", "genetics", "evolution", "bio", "lab")),
    (("engineering",), ("design", "circuit", "system", "project", "engineering", "eng")),
    (
        ("literature", "english", "writing"),
        ("essay", "analysis", "paper", "reading", "literature", "writing"),
    ),
    (
        ("history",),
        ("historical", "period", "civilization", "war", "revolution", "history"),
    ),
    (
        ("economics", "econ"),
        ("market", "economy", "finance", "trade", "econ", "macro", "micro"),
    ),
    (
        ("psychology", "psych"),
        ("behavior", "cognitive", "mental", "study", "research", "psych"),
    ),
]

CONTENT_SUBJECT_KEYWORDS: list[tuple[tuple[str, ...], tuple[str, ...]]] = [
    (
        ("computer", "programming", "software", "coding", "development"),
        (
            "algorithm", "data structure", "function", "variable", "loop",
            "array", "object", "class", "method", "database", "api",
            "code", "programming", "software", "debug", "compile",
            "syntax", "framework", "library", "git", "version control",
        ),
    ),
    (
        ("math", "calculus", "algebra", "geometry", "statistics"),
        (
            "equation", "formula", "theorem", "proof", "derivative",
            "integral", "matrix", "vector", "probability", "statistics",
            "function", "graph", "limit", "series", "sequence",
            "variable", "coefficient", "polynomial", "exponential", "logarithm",
        ),
    ),
    (
        ("physics", "mechanics", "thermodynamics", "electromagnetism"),
        (
            "force", "energy", "momentum", "velocity", "acceleration",
            "mass", "gravity", "friction", "wave", "frequency",
            "amplitude", "electric", "magnetic", "field", "charge",
            "quantum", "particle", "relativity", "newton", "einstein",
        ),
    ),
    (
        ("chemistry", "chemical", "organic", "inorganic"),
        (
            "atom", "molecule", "element", "compound", "reaction",
            "bond", "electron", "proton", "neutron", "periodic",
            "acid", "base", "ph", "oxidation", "reduction",
            "organic", "inorganic", "catalyst", "equilibrium", "concentration",
        ),
    ),
    (
        ("biology", "biological", "genetics", "ecology"),
        (
            "cell", "dna", "rna", "protein", "gene",
            "chromosome", "evolution", "species", "organism", "ecosystem",
            "photosynthesis", "respiration", "metabolism", "enzyme", "mutation",
            "natural selection", "adaptation", "biodiversity", "ecology", "anatomy",
        ),
    ),
    (
        ("literature", "english", "writing", "composition"),
        (
            "essay", "thesis", "analysis", "theme", "character",
            "plot", "setting", "narrative", "metaphor", "symbolism",
            "rhetoric", "argument", "citation", "bibliography", "prose",
            "poetry", "novel", "shakespeare", "literary", "critique",
        ),
    ),
    (
        ("history", "historical"),
        (
            "civilization", "empire", "revolution", "war", "treaty",
            "constitution", "democracy", "monarchy", "republic", "colonialism",
            "industrial", "renaissance", "medieval", "ancient", "modern",
            "historical", "primary source", "secondary source", "historiography", "timeline",
        ),
    ),
    (
        ("economics", "economic", "finance"),
        (
            "supply", "demand", "market", "price", "elasticity",
            "gdp", "inflation", "unemployment", "fiscal", "monetary",
            "trade", "investment", "capital", "labor", "productivity",
            "microeconomics", "macroeconomics", "equilibrium", "utility", "cost",
        ),
    ),
    (
        ("psychology", "psychological"),
        (
            "behavior", "cognition", "memory", "learning", "perception",
            "personality", "motivation", "emotion", "development", "disorder",
            "therapy", "neuroscience", "brain", "mental", "consciousness",
            "freud", "jung", "piaget", "experiment", "research",
        ),
    ),
]


def keywords_for(
    course_name: str,
    table: list[tuple[tuple[str, ...], tuple[str, ...]]],
) -> list[str]:
    """Collect keywords for every subject whose trigger appears in *course_name*.

    Order follows the table; a keyword shared by two subjects is listed twice
    so that it counts once per subject.
    """
    lower_name = course_name.lower()
    keywords: list[str] = []
    for triggers, subject_keywords in table:
        if any(trigger in lower_name for trigger in triggers):
            keywords.extend(subject_keywords)
    return keywords
