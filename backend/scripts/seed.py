"""Seed script to create demo forms for development."""

from formbuilder.config import get_settings
from formbuilder.services.persistence import SqlAlchemyGateway
from formbuilder.services.store import FormStore


# Demo form configurations: fields are added in order; derived fields name
# their parents by the label of an earlier field.
DEMO_FORMS = [
    {
        "title": "Event Registration",
        "description": "Sign up for the annual meetup. Your age is computed from your date of birth.",
        "fields": [
            {"type": "text", "label": "Full Name", "required": True},
            {"type": "email", "label": "Email", "required": True},
            {"type": "date", "label": "Date of Birth", "required": True},
            {
                "type": "derived",
                "label": "Age",
                "derivation_type": "age_from_dob",
                "parents": ["Date of Birth"],
            },
            {"type": "select", "label": "T-Shirt Size", "options": ["S", "M", "L", "XL"]},
            {
                "type": "checkbox-group",
                "label": "Sessions",
                "group_options": [
                    {"id": "talks", "label": "Talks", "value": "talks"},
                    {"id": "workshops", "label": "Workshops", "value": "workshops"},
                ],
            },
            {"type": "checkbox", "label": "I accept the code of conduct", "required": True},
        ],
    },
    {
        "title": "Expense Report",
        "description": "Itemized expenses with computed totals.",
        "fields": [
            {"type": "number", "label": "Travel", "validation": {"min": 0}},
            {"type": "number", "label": "Lodging", "validation": {"min": 0}},
            {"type": "number", "label": "Advance", "validation": {"min": 0}},
            {
                "type": "derived",
                "label": "Total",
                "derivation_type": "sum",
                "parents": ["Travel", "Lodging"],
            },
            {
                "type": "derived",
                "label": "Amount Due (incl. 10% fee)",
                "derivation_type": "custom",
                "parents": ["Travel", "Lodging", "Advance"],
                "formula": "({Travel} + {Lodging}) * 1.1 - {Advance}",
            },
        ],
    },
]


def seed_forms(store: FormStore) -> int:
    """Create the demo forms that do not exist yet; returns how many were created."""
    existing_titles = {form.title for form in store.saved_forms}
    created = 0

    for form_config in DEMO_FORMS:
        if form_config["title"] in existing_titles:
            print(f"  Skipped existing form: {form_config['title']}")
            continue

        store.new_form()
        store.set_title(form_config["title"])
        store.set_description(form_config["description"])

        ids_by_label = {}
        for field_config in form_config["fields"]:
            config = dict(field_config)
            field_type = config.pop("type")
            parents = [ids_by_label[label] for label in config.pop("parents", [])]
            formula = config.pop("formula", None)
            if parents:
                config["parent_fields"] = parents
            if formula is not None:
                # Formulas reference parents by label here, by id once stored
                for label, field_id in ids_by_label.items():
                    formula = formula.replace(f"{{{label}}}", f"{{{field_id}}}")
                config["derivation_formula"] = formula

            field = store.add_field(field_type, **config)
            ids_by_label[field.label] = field.id

        store.save_form()
        created += 1
        print(f"  Created form: {form_config['title']}")

    store.new_form()
    return created


if __name__ == "__main__":
    settings = get_settings()
    print(f"Seeding demo forms into {settings.database_url}...")

    with FormStore(SqlAlchemyGateway.from_url(settings.database_url), settings=settings) as store:
        count = seed_forms(store)

    print(f"\nSeed data created successfully! ({count} new forms)")
