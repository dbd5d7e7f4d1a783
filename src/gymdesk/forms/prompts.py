"""Interactive terminal front end for the trainer wizard."""

import click
import questionary
from questionary import Style

from ..errors import ValidationError
from .trainer_wizard import STEPS, TrainerWizard

# Custom style for the questionnaire
custom_style = Style(
    [
        ("qmark", "fg:#673ab7 bold"),
        ("question", "bold"),
        ("answer", "fg:#f44336 bold"),
        ("pointer", "fg:#673ab7 bold"),
        ("highlighted", "fg:#673ab7 bold"),
        ("selected", "fg:#cc5454"),
        ("separator", "fg:#cc5454"),
        ("instruction", ""),
        ("text", ""),
    ]
)

COMMON_SPECIALIZATIONS = [
    "Strength Training",
    "Weight Loss",
    "Pilates",
    "Yoga",
    "Rehabilitation",
    "Sports Performance",
    "Senior Fitness",
    "Prenatal",
]

COMMON_LANGUAGES = ["English", "French", "Spanish", "German", "Portuguese", "Arabic"]


def _split(text: str | None) -> list[str]:
    return [part.strip() for part in (text or "").split(",") if part.strip()]


class TrainerWizardPrompter:
    """Walks the user through the wizard steps with questionary prompts.

    Answers are written into the wizard; moving forward always goes through
    ``TrainerWizard.next`` so each step is validated before the next one.
    """

    def __init__(self, wizard: TrainerWizard | None = None):
        self.wizard = wizard or TrainerWizard()

    async def run(self) -> dict | None:
        """Collect all steps and return the creation payload, or None if aborted."""
        while True:
            step = self.wizard.step
            click.echo()
            click.echo(
                click.style(f"Step {step.id} of {len(STEPS)}: {step.title}", bold=True)
                + (" (optional)" if step.is_optional else "")
            )
            click.echo(f"  {step.description}")

            answers = await self._ask_step(step.id)
            if answers is None:
                return None
            self.wizard.update(**answers)

            try:
                if self.wizard.is_last_step:
                    return self.wizard.submit()
                self.wizard.next()
            except ValidationError as e:
                click.echo(click.style(f"  {e.message}", fg="red"))
                for field_name, message in e.errors.items():
                    click.echo(click.style(f"    {field_name}: {message}", fg="red"))

                go_back = await questionary.confirm(
                    "Go back to the previous step?", default=False, style=custom_style
                ).ask_async()
                if go_back:
                    self.wizard.previous()

    async def _ask_step(self, step_id: int) -> dict | None:
        data = self.wizard.data
        if step_id == 1:
            return await self._ask_texts(
                [
                    ("first_name", "First name:"),
                    ("last_name", "Last name:"),
                    ("email", "Email:"),
                    ("phone", "Phone (optional):"),
                    ("date_of_birth", "Date of birth YYYY-MM-DD (optional):"),
                    ("trainer_code", "Trainer code (blank to generate):"),
                ]
            )

        if step_id == 2:
            return await self._ask_texts(
                [
                    ("hourly_rate", "Hourly rate (optional):"),
                    ("commission_rate", "Commission rate in % (optional, default 15):"),
                    ("years_experience", "Years of experience (optional):"),
                ]
            )

        if step_id == 3:
            specializations = await questionary.checkbox(
                "Specializations:",
                choices=[
                    questionary.Choice(name, name, checked=name in data["specializations"])
                    for name in COMMON_SPECIALIZATIONS
                ],
                style=custom_style,
            ).ask_async()
            if specializations is None:
                return None
            languages = await questionary.checkbox(
                "Languages (at least one):",
                choices=[
                    questionary.Choice(name, name, checked=name in data["languages"])
                    for name in COMMON_LANGUAGES
                ],
                style=custom_style,
            ).ask_async()
            if languages is None:
                return None
            certifications = await questionary.text(
                "Certifications (comma separated):",
                default=", ".join(data["certifications"]),
                style=custom_style,
            ).ask_async()
            if certifications is None:
                return None
            return {
                "specializations": specializations,
                "languages": languages,
                "certifications": _split(certifications),
            }

        if step_id == 4:
            answers = await self._ask_texts(
                [("max_clients_per_session", "Max clients per session (optional):")]
            )
            if answers is None:
                return None
            accepting = await questionary.confirm(
                "Accepting new clients?",
                default=bool(data["is_accepting_new_clients"]),
                style=custom_style,
            ).ask_async()
            if accepting is None:
                return None
            answers["is_accepting_new_clients"] = accepting
            return answers

        return await self._ask_texts(
            [
                ("insurance_policy_number", "Insurance policy number (optional):"),
                ("background_check_date", "Background check date YYYY-MM-DD (optional):"),
                ("cpr_certification_expires", "CPR certification expires YYYY-MM-DD (optional):"),
                ("emergency_contact_name", "Emergency contact name (optional):"),
                ("emergency_contact_relationship", "Emergency contact relationship (optional):"),
                ("emergency_contact_phone", "Emergency contact phone (optional):"),
                ("notes", "Notes (optional):"),
            ]
        )

    async def _ask_texts(self, questions: list[tuple[str, str]]) -> dict | None:
        answers = {}
        for key, prompt in questions:
            current = self.wizard.data.get(key)
            answer = await questionary.text(
                prompt,
                default="" if current is None else str(current),
                style=custom_style,
            ).ask_async()
            if answer is None:  # Ctrl+C
                return None
            answers[key] = answer.strip()
        return answers
