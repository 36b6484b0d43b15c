"""Catalog of the sandbox scenarios and their challenge prompts."""
from __future__ import annotations

from dataclasses import dataclass

from ..core.model import ScenarioKind


@dataclass(frozen=True)
class ScenarioInfo:
    kind: ScenarioKind
    name: str
    level: str
    description: str
    question: str
    answer: str
    insight_title: str
    insight: str
    lecture: str
    lecture_url: str

    @property
    def key(self) -> str:
        return self.kind.value


SCENARIO_DEFINITIONS: tuple[ScenarioInfo, ...] = (
    ScenarioInfo(
        kind=ScenarioKind.INCLINE,
        name="Ramp Speed",
        level="Mechanics 1",
        description="Slide a block down a 5 m ramp with kinetic friction.",
        question="If you double the mass with angle and friction unchanged, what happens to the time to reach the target?",
        answer="It stays the same: mass cancels out of the acceleration along the ramp.",
        insight_title="Mass Cancels",
        insight=(
            "On a frictionless ramp, the speed at the bottom depends on the height drop, not the mass. "
            "Friction and the shape of the body change the details, but mass still cancels out of the "
            "translational acceleration, which is why changing the mass here changes nothing."
        ),
        lecture="Feynman Lectures Vol. I, Ch. 5",
        lecture_url="https://www.feynmanlectures.caltech.edu/I_05.html",
    ),
    ScenarioInfo(
        kind=ScenarioKind.PROJECTILE,
        name="Projectile Motion",
        level="Mechanics 2",
        description="Launch a projectile at a target 40 m away.",
        question="At what angle does a projectile achieve maximum range in a vacuum?",
        answer="45°: range = v² sin(2θ) / g is largest when sin(2θ) = 1.",
        insight_title="Parabolic Paths",
        insight=(
            "Projectile motion combines constant horizontal velocity with constant downward acceleration, "
            "so the path is a parabola. Maximum range occurs at 45° in a vacuum. Real projectiles deviate "
            "because of air resistance: idealized physics versus real physics."
        ),
        lecture="Feynman Lectures Vol. I, Ch. 9",
        lecture_url="https://www.feynmanlectures.caltech.edu/I_09.html",
    ),
    ScenarioInfo(
        kind=ScenarioKind.PENDULUM,
        name="Pendulum Period",
        level="Mechanics 3",
        description="Swing a pendulum; the period depends on length, not amplitude (for small angles).",
        question="If you double the length of the pendulum, how does the period change?",
        answer="It grows by √2 ≈ 1.41, since T ∝ √L.",
        insight_title="Simple Harmonic Motion",
        insight=(
            "For small angles a pendulum undergoes simple harmonic motion. The period T = 2π√(L/g) "
            "depends only on length and gravity, not on mass or amplitude. Galileo noticed this by "
            "watching a chandelier swing in a cathedral."
        ),
        lecture="Feynman Lectures Vol. I, Ch. 21",
        lecture_url="https://www.feynmanlectures.caltech.edu/I_21.html",
    ),
    ScenarioInfo(
        kind=ScenarioKind.CIRCULAR,
        name="Circular Motion",
        level="Mechanics 4",
        description="Explore centripetal acceleration versus speed and radius.",
        question="If you double the speed at constant radius, how does centripetal acceleration change?",
        answer="It grows by a factor of 4, since a = v² / r.",
        insight_title="Centripetal Force",
        insight=(
            "An object moving in a circle at constant speed is accelerating toward the center. The "
            "centripetal acceleration a = v²/r needs a net inward force F = ma, supplied by tension, "
            "gravity, friction or a normal force. Speed stays constant while velocity keeps turning."
        ),
        lecture="Feynman Lectures Vol. I, Ch. 7",
        lecture_url="https://www.feynmanlectures.caltech.edu/I_07.html",
    ),
    ScenarioInfo(
        kind=ScenarioKind.ORBITAL,
        name="Orbital Mechanics",
        level="Astronomy 1",
        description="Kepler's third law for a planet circling the Sun.",
        question="If you double the orbital radius, what happens to the orbital period?",
        answer="For a stable orbit T² ∝ r³, so the period grows by √8 ≈ 2.83.",
        insight_title="Kepler's Laws",
        insight=(
            "Planets orbit in ellipses with the Sun at one focus, and the period depends on the "
            "semi-major axis as T² ∝ a³. Kepler found the rule and Newton's gravity explained it."
        ),
        lecture="Feynman Lectures Vol. I, Ch. 7",
        lecture_url="https://www.feynmanlectures.caltech.edu/I_07.html",
    ),
    ScenarioInfo(
        kind=ScenarioKind.STELLAR,
        name="Stellar Evolution",
        level="Astronomy 2",
        description="Stellar mass sets luminosity and main-sequence lifetime.",
        question="A star with 10 times the Sun's mass burns how many times faster?",
        answer="About 316 times: L ∝ M^3.5 gives ~3162× the luminosity from only 10× the fuel.",
        insight_title="Stellar Nucleosynthesis",
        insight=(
            "Stars are furnaces where nuclear fusion builds heavier elements. Massive stars burn hotter "
            "and faster, living only millions of years before exploding as supernovae, while low-mass "
            "stars like the Sun burn for billions. The heavier elements in your body were forged in stars."
        ),
        lecture="Feynman Lectures Vol. I, Ch. 42",
        lecture_url="https://www.feynmanlectures.caltech.edu/I_42.html",
    ),
    ScenarioInfo(
        kind=ScenarioKind.LENSING,
        name="Gravitational Lensing",
        level="Astronomy 3",
        description="Massive objects bend light from distant sources.",
        question="What happens to the deflection angle if you double the lens mass at the same distance?",
        answer="It roughly doubles: deflection scales with lens mass and inversely with distance.",
        insight_title="Spacetime Curvature",
        insight=(
            "Massive objects curve spacetime, and light follows the straightest path through it, which "
            "we see as bending. Lensing lets astronomers map dark matter and find exoplanets. "
            "Einstein's prediction was confirmed during the 1919 solar eclipse."
        ),
        lecture="Feynman Lectures Vol. II, Ch. 42",
        lecture_url="https://www.feynmanlectures.caltech.edu/II_42.html",
    ),
)


@dataclass(frozen=True)
class StellarStage:
    name: str
    process: str
    traits: str


# Life cycle shown by the stellar evolution scenario, earliest stage first.
STELLAR_STAGES: tuple[StellarStage, ...] = (
    StellarStage("Main Sequence", "Hydrogen fusing in core", "Stable for billions of years"),
    StellarStage("Red Giant", "Shell burning, expanded", "Cooler, larger, brighter"),
    StellarStage("White Dwarf", "Core remnant cooling", "Dense, faint, long-lived"),
    StellarStage("Neutron Star", "Extreme compression", "Incredibly dense, pulsing"),
    StellarStage("Black Hole", "Infinite density", "Event horizon, no escape"),
)

SCENARIOS: dict[str, ScenarioInfo] = {info.key: info for info in SCENARIO_DEFINITIONS}
SCENARIO_DISPLAY_ORDER: list[str] = [info.key for info in SCENARIO_DEFINITIONS]
DEFAULT_SCENARIO_KEY = SCENARIO_DISPLAY_ORDER[0]


__all__ = [
    "DEFAULT_SCENARIO_KEY",
    "SCENARIOS",
    "SCENARIO_DEFINITIONS",
    "SCENARIO_DISPLAY_ORDER",
    "STELLAR_STAGES",
    "ScenarioInfo",
    "StellarStage",
]
