"""Default UI components and registry administration helpers."""

import logging

from ..domain import ComponentDescriptor
from ..domain.exceptions import InvalidComponentError
from ..ports.repository_port import ComponentRegistryPort

logger = logging.getLogger(__name__)


def default_components() -> list[ComponentDescriptor]:
    """The three resume views shipped with the frontend."""
    return [
        ComponentDescriptor(
            name="work-timeline",
            display_name="Work Experience Timeline",
            description="Interactive timeline of career history, roles and achievements",
            intent=["work experience", "career", "jobs", "employment history", "professional background"],
            component_path="components/work-timeline",
            priority=30,
        ),
        ComponentDescriptor(
            name="education-selector",
            display_name="Education",
            description="Undergraduate and graduate education with degrees and institutions",
            intent=["education", "school", "university", "degree", "studies"],
            component_path="components/education-selector",
            priority=20,
        ),
        ComponentDescriptor(
            name="social-links",
            display_name="Personal Passions & Social Links",
            description="Personal interests, hobbies and social media profiles",
            intent=["hobbies", "interests", "passions", "social media", "contact"],
            component_path="components/social-links",
            priority=10,
        ),
    ]


def validate_component(component: ComponentDescriptor) -> None:
    """Reject descriptors the intent router could not use.

    Raises:
        InvalidComponentError: If a required field is blank or priority is negative.
    """
    for field_name in ("name", "display_name", "description", "component_path"):
        if not getattr(component, field_name).strip():
            raise InvalidComponentError(f"Component {field_name} cannot be empty", context={"name": component.name})
    if component.priority < 0:
        raise InvalidComponentError("Component priority cannot be negative", context={"name": component.name})


def seed_default_components(registry: ComponentRegistryPort) -> list[str]:
    """Insert the default components that are not registered yet.

    Returns:
        Names of the components that were created.
    """
    created = []
    for component in default_components():
        if registry.get_component_by_name(component.name) is not None:
            logger.debug("Component %s already registered", component.name)
            continue
        try:
            registry.create_component(component)
        except InvalidComponentError:
            # An inactive descriptor with the same name already exists
            logger.info("Skipping %s: name taken by an inactive component", component.name)
            continue
        created.append(component.name)
    logger.info("Seeded %d default components", len(created))
    return created
