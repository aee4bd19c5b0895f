"""
Candidate/job compatibility score.

A fixed rule table: each signal yields a partial score in 0..100 and the
weighted sum is rounded half up. Pure functions, no I/O.
"""

import math
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel

WEIGHTS: Dict[str, float] = {
    "skills": 0.30,
    "title": 0.25,
    "industry": 0.20,
    "location": 0.10,
    "experience": 0.10,
    "contract": 0.03,
    "salary": 0.02,
}

DEFAULT_SCORE = 50
INCOMPATIBLE_SCORE = 5
NOT_ENOUGH_DATA = "Not enough data to compute a match"

COMMON_SKILLS = (
    "javascript", "react", "node.js", "python", "java", "php", "sql", "mongodb", "html", "css",
    "typescript", "vue.js", "angular", "express", "django", "git", "docker", "kubernetes", "aws",
    "azure", "gcp", "linux", "windows", "figma", "photoshop", "illustrator", "sketch", "adobe",
    "design", "marketing", "seo", "sem", "analytics", "google analytics", "facebook", "salesforce",
    "hubspot", "mailchimp", "wordpress", "shopify", "project management", "agile", "scrum",
    "kanban", "jira", "trello", "excel", "powerpoint", "word", "office", "google suite",
    "communication", "leadership", "teamwork", "problem solving", "data analysis", "statistics",
    "machine learning", "ai", "blockchain", "medical", "healthcare", "clinical", "pharmaceutical",
    "diagnostic", "legal", "law", "juridique", "droit", "contract", "finance", "accounting",
    "banking", "investment", "trading",
)

_MEDICAL_TERMS = (
    "médecin", "docteur", "médecine", "medical", "healthcare", "hospital", "pharmacie",
    "pharmaceutique", "chirurgie", "infirmier", "infirmière",
)
_DEV_TERMS = ("développeur", "developer", "programming", "coding")

# domain -> (keywords, keywords of domains it cannot match with)
INCOMPATIBLE_DOMAINS: Dict[str, Tuple[Tuple[str, ...], Tuple[str, ...]]] = {
    "medical": (
        _MEDICAL_TERMS + ("clinique", "patient", "diagnostic", "traitement"),
        ("tech", "informatique", "développement", "programming", "developer", "coding", "software",
         "web", "application", "it", "technologie", "ingénieur logiciel"),
    ),
    "tech": (
        ("développeur", "developer", "programming", "coding", "software", "web", "application", "it",
         "technologie", "ingénieur logiciel", "javascript", "python", "java", "react", "node"),
        _MEDICAL_TERMS,
    ),
    "legal": (
        ("avocat", "juriste", "droit", "legal", "lawyer", "attorney", "justice", "tribunal", "juridique"),
        ("médecin", "docteur", "médecine", "medical", "healthcare") + _DEV_TERMS,
    ),
    "education": (
        ("professeur", "enseignant", "teacher", "education", "enseignement", "école", "université",
         "académique"),
        _DEV_TERMS + ("médecin", "docteur", "médecine"),
    ),
}

FRANCE_CITIES = ("paris", "lyon", "marseille", "toulouse", "nantes", "lille", "strasbourg")
EUROPE_COUNTRIES = ("france", "allemagne", "espagne", "italie", "belgique", "suisse")
REMOTE_MARKERS = ("remote", "télétravail", "hybrid")

EXPERIENCE_LEVELS = {
    "débutant": 1,
    "junior": 2,
    "intermédiaire": 3,
    "senior": 4,
    "expert": 5,
    "lead": 6,
    "manager": 7,
}
EXPECTED_SALARIES = {
    "débutant": 30000,
    "junior": 35000,
    "intermédiaire": 45000,
    "senior": 60000,
    "expert": 80000,
    "lead": 90000,
    "manager": 100000,
}
DEFAULT_EXPECTED_SALARY = 45000

TITLE_STOP_WORDS = ("de", "le", "la", "les", "un", "une", "du", "des", "et", "ou", "pour", "avec", "sur", "dans")

SEMANTIC_GROUPS: Dict[str, Tuple[str, ...]] = {
    "development": ("développeur", "dev", "programmer", "developer", "ingénieur logiciel", "engineer",
                    "software", "coding", "programmation"),
    "design": ("designer", "design", "ux", "ui", "graphiste", "graphic", "creative"),
    "marketing": ("marketing", "marketeur", "communication", "brand", "publicité", "advertising"),
    "sales": ("commercial", "sales", "business", "account", "business development"),
    "management": ("manager", "lead", "chef", "directeur", "head", "director"),
    "medical": ("médecin", "docteur", "medical", "healthcare", "clinique", "hospital", "médecine"),
    "legal": ("avocat", "juriste", "legal", "lawyer", "droit", "juridique"),
    "finance": ("finance", "comptable", "accounting", "banking", "investment", "trading"),
    "education": ("professeur", "enseignant", "teacher", "education", "enseignement"),
}

_TECH_SKILLS = ("javascript", "python", "java", "react", "node.js", "programming", "development",
                "développeur", "developer", "software", "web", "application", "coding")
_HEALTH_SKILLS = ("medical", "health", "pharmaceutical", "clinical", "research", "médecin", "docteur",
                  "médecine", "healthcare", "hospital", "clinique")
_EDUCATION_SKILLS = ("teaching", "education", "training", "learning", "academic", "professeur",
                     "enseignant", "enseignement")
_LEGAL_SKILLS = ("legal", "law", "juridique", "droit", "avocat", "juriste", "lawyer", "contract")

# Checked in order; the first industry matching the job's industry decides the score
INDUSTRY_SKILLS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("tech", _TECH_SKILLS),
    ("informatique", _TECH_SKILLS + ("it", "technologie")),
    ("design", ("figma", "photoshop", "illustrator", "design", "ux", "ui", "graphic", "graphiste", "creative")),
    ("marketing", ("marketing", "seo", "analytics", "social media", "advertising", "brand", "communication",
                   "publicité")),
    ("finance", ("finance", "accounting", "banking", "investment", "trading", "comptable", "financier")),
    ("healthcare", _HEALTH_SKILLS),
    ("medical", _HEALTH_SKILLS),
    ("éducation", _EDUCATION_SKILLS),
    ("education", _EDUCATION_SKILLS),
    ("legal", _LEGAL_SKILLS),
    ("juridique", _LEGAL_SKILLS),
)

RECOMMENDATIONS = (
    (90, "Perfect match"),
    (80, "Excellent match"),
    (70, "Good match"),
    (60, "Decent match"),
    (50, "Average match"),
    (40, "Weak match"),
)


class MatchResult(BaseModel):
    score: int
    details: Dict[str, Any]
    weights: Dict[str, float]
    recommendation: str


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _text(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    return str(value)


def normalize_skills(skills: Any) -> List[str]:
    """Skills are stored as a text array; a comma separated string is accepted too."""
    if not skills:
        return []
    if isinstance(skills, str):
        skills = skills.split(",")
    return [str(skill).strip() for skill in skills if str(skill).strip()]


def _candidate_text(candidate: Dict[str, Any]) -> str:
    skills = " ".join(normalize_skills(candidate.get("skills")))
    return f"{_text(candidate.get('job_title'))} {_text(candidate.get('bio_pro'))} {skills}".lower()


def check_domain_incompatibility(candidate: Dict[str, Any], job: Dict[str, Any]) -> Optional[str]:
    """Reason string when candidate and job belong to incompatible domains, None otherwise."""
    candidate_text = _candidate_text(candidate)
    job_text = f"{_text(job.get('title'))} {_text(job.get('description'))} {_text(job.get('industry'))}".lower()

    for domain, (keywords, incompatible_with) in INCOMPATIBLE_DOMAINS.items():
        if any(k in candidate_text for k in keywords) and any(k in job_text for k in incompatible_with):
            return f"Candidate {domain} profile is incompatible with the job sector"
        if any(k in job_text for k in keywords) and any(k in candidate_text for k in incompatible_with):
            return f"Job {domain} sector is incompatible with the candidate profile"
    return None


def skills_score(skills: Any, job_description: Any, job_title: Any) -> int:
    user_skills = [skill.lower() for skill in normalize_skills(skills)]
    if not user_skills:
        return 0
    job_text = f"{_text(job_title)} {_text(job_description)}".lower()

    relevant = 0
    matched = 0
    for skill in user_skills:
        if not any(skill in common or common in skill for common in COMMON_SKILLS):
            continue
        relevant += 1
        if skill in job_text or any(skill in common and common in job_text for common in COMMON_SKILLS):
            matched += 1

    if relevant == 0:
        return 0
    return round_half_up(matched / relevant * 100)


def location_score(city: Any, country: Any, job_location: Any, job_remote: Any) -> int:
    if job_remote is True:
        return 90
    remote = _text(job_remote).lower()
    if remote and any(marker in remote for marker in REMOTE_MARKERS):
        return 90

    city = _text(city).lower().strip()
    country = _text(country).lower().strip()
    if not city and not country:
        return 0
    location = _text(job_location).lower()
    if not location:
        return 0

    candidate_location = f"{city} {country}".strip()
    if candidate_location in location or location in candidate_location:
        return 100
    if city and city in location:
        return 85
    if country and country in location:
        return 70
    if any(c in location for c in FRANCE_CITIES) and "france" in country:
        return 60
    if any(c in location for c in EUROPE_COUNTRIES) and "europe" in country:
        return 40
    return 0


def experience_score(candidate_level: Any, job_level: Any) -> int:
    candidate_level = _text(candidate_level).lower()
    job_level = _text(job_level).lower()
    if not candidate_level or not job_level:
        return 0
    difference = abs(EXPERIENCE_LEVELS.get(candidate_level, 3) - EXPERIENCE_LEVELS.get(job_level, 3))
    return {0: 100, 1: 80, 2: 60, 3: 40}.get(difference, 10)


def title_score(job_title_wanted: Any, bio: Any, job_title: Any) -> int:
    title = _text(job_title).lower().strip()
    if not title:
        return 0
    candidate_text = f"{_text(job_title_wanted)} {_text(bio)}".lower().strip()
    if not candidate_text:
        return 0
    if title in candidate_text or candidate_text in title:
        return 100

    candidate_words = [w for w in candidate_text.split() if len(w) > 2]
    title_words = [w for w in title.split() if len(w) > 2]
    common = [w for w in candidate_words if w in title_words and len(w) > 3 and w not in TITLE_STOP_WORDS]
    if common:
        return round_half_up(len(common) / max(len(candidate_words), len(title_words)) * 80)

    for keywords in SEMANTIC_GROUPS.values():
        if any(k in candidate_text for k in keywords) and any(k in title for k in keywords):
            return 70
    return 0


def industry_score(candidate: Dict[str, Any], job_industry: Any) -> int:
    industry = _text(job_industry).lower()
    if not industry:
        return 0
    candidate_text = _candidate_text(candidate)
    for name, keywords in INDUSTRY_SKILLS:
        if name in industry or industry in name:
            found = [k for k in keywords if k in candidate_text]
            if not found:
                return 10
            return round_half_up(len(found) / len(keywords) * 100)
    return 0


def contract_score(availability: Any, contract_type: Any) -> int:
    contract = _text(contract_type).lower()
    if not contract:
        return 0
    if availability:
        return 90
    for marker, score in (("cdi", 80), ("cdd", 70), ("stage", 60), ("freelance", 50)):
        if marker in contract:
            return score
    return 0


def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def salary_score(candidate_level: Any, salary_min: Any, salary_max: Any) -> int:
    salary_min = _as_number(salary_min)
    salary_max = _as_number(salary_max)
    if not salary_min and not salary_max:
        return 0
    expected = EXPECTED_SALARIES.get(_text(candidate_level).lower(), DEFAULT_EXPECTED_SALARY)
    offered = salary_max or salary_min
    difference_pct = abs(expected - offered) / expected * 100
    for threshold, score in ((10, 100), (20, 80), (30, 60), (50, 40)):
        if difference_pct <= threshold:
            return score
    return 10


def get_recommendation(score: int) -> str:
    for threshold, label in RECOMMENDATIONS:
        if score >= threshold:
            return label
    return "Very weak match"


def has_enough_data(candidate: Dict[str, Any], job: Dict[str, Any]) -> bool:
    candidate_ok = bool(
        normalize_skills(candidate.get("skills"))
        or _text(candidate.get("job_title")).strip()
        or _text(candidate.get("bio_pro")).strip()
    )
    job_ok = bool(_text(job.get("title")).strip() or _text(job.get("description")).strip())
    return candidate_ok and job_ok


def calculate_matching_score(candidate: Dict[str, Any], job: Dict[str, Any]) -> MatchResult:
    """Score a candidate profile (user_ row) against a job offer (job_offer row)."""
    if not has_enough_data(candidate, job):
        return MatchResult(
            score=DEFAULT_SCORE,
            details={signal: None for signal in WEIGHTS},
            weights=dict(WEIGHTS),
            recommendation=NOT_ENOUGH_DATA,
        )

    reason = check_domain_incompatibility(candidate, job)
    if reason:
        details: Dict[str, Any] = {signal: 0 for signal in WEIGHTS}
        details["incompatibility"] = reason
        return MatchResult(
            score=INCOMPATIBLE_SCORE,
            details=details,
            weights={},
            recommendation=f"Incompatible domains: {reason}",
        )

    details = {
        "skills": skills_score(candidate.get("skills"), job.get("description"), job.get("title")),
        "title": title_score(candidate.get("job_title"), candidate.get("bio_pro"), job.get("title")),
        "industry": industry_score(candidate, job.get("industry")),
        "location": location_score(candidate.get("city"), candidate.get("country"),
                                   job.get("location"), job.get("remote")),
        "experience": experience_score(candidate.get("experience_level"), job.get("experience")),
        "contract": contract_score(candidate.get("availability"), job.get("contract_type")),
        "salary": salary_score(candidate.get("experience_level"), job.get("salary_min"), job.get("salary_max")),
    }
    total = round_half_up(sum(details[signal] * weight for signal, weight in WEIGHTS.items()))
    total = max(0, min(100, total))
    details["total"] = total
    return MatchResult(
        score=total,
        details=details,
        weights=dict(WEIGHTS),
        recommendation=get_recommendation(total),
    )
