from __future__ import annotations

from chefdesk.chef.models import ChefCategory
from chefdesk.chef.parsing import (
    categorize_response,
    extract_recommendations,
    parse_recipe,
    truncate,
)

SALMON = (
    "Recipe: **Grilled Salmon** Ingredients:\n- salmon\n- lemon\n"
    "Instructions:\n1. Grill\n2. Serve"
)


# ── Classification ───────────────────────────────────────────────────────


class TestCategorize:
    def test_cocktail_beats_cost(self):
        assert categorize_response("A cocktail that keeps cost low?", "") == ChefCategory.cocktails

    def test_cocktail_in_response_beats_cost_in_message(self):
        result = categorize_response("How do I cut cost?", "Try a batched cocktail program.")
        assert result == ChefCategory.cocktails

    def test_efficiency(self):
        assert categorize_response("Reduce labor hours", "Cross-train staff.") == ChefCategory.efficiency

    def test_efficiency_from_response(self):
        result = categorize_response("Help with prep", "Optimize your station layout.")
        assert result == ChefCategory.efficiency

    def test_flavor_pairing(self):
        result = categorize_response("What goes with fennel?", "Fennel and orange pair nicely.")
        assert result == ChefCategory.flavor_pairing

    def test_efficiency_beats_flavor(self):
        result = categorize_response("ingredient cost breakdown", "Use seasonal produce.")
        assert result == ChefCategory.efficiency

    def test_case_insensitive(self):
        assert categorize_response("COCKTAIL IDEAS", "") == ChefCategory.cocktails

    def test_default_menu(self):
        assert categorize_response("New brunch dishes?", "Try shakshuka.") == ChefCategory.menu

    def test_empty_inputs(self):
        assert categorize_response("", "") == ChefCategory.menu


# ── Recipe parsing ───────────────────────────────────────────────────────


class TestParseRecipe:
    def test_no_sections_returns_none(self):
        assert parse_recipe("A lovely plate with bright acidity.") is None

    def test_ingredients_only(self):
        recipe = parse_recipe("Ingredients:\n• 2 cups flour\n* 1 egg\n\n- salt")
        assert recipe.ingredients == ["2 cups flour", "1 egg", "salt"]
        assert recipe.instructions == []

    def test_method_label(self):
        recipe = parse_recipe("Method:\n1) Sear\n2) Rest")
        assert recipe.instructions == ["Sear", "Rest"]

    def test_directions_label_with_bullets(self):
        recipe = parse_recipe("Directions:\n- Whisk the eggs\n- Fold in cheese")
        assert recipe.instructions == ["Whisk the eggs", "Fold in cheese"]

    def test_marker_stripping_keeps_content(self):
        recipe = parse_recipe("Ingredients:\n-  2-3 sprigs thyme\nInstructions:\n1. 1.5 oz gin, shaken")
        assert recipe.ingredients == ["2-3 sprigs thyme"]
        assert recipe.instructions == ["1.5 oz gin, shaken"]

    def test_numbers_without_punctuation_are_content(self):
        recipe = parse_recipe("Ingredients:\n2 lemons\n10 g salt")
        assert recipe.ingredients == ["2 lemons", "10 g salt"]

    def test_label_word_inside_a_step_does_not_end_section(self):
        recipe = parse_recipe(
            "Ingredients:\n- flour\nInstructions:\n"
            "1. Mix the dry ingredients: flour and salt\n2. Bake"
        )
        assert recipe.ingredients == ["flour"]
        assert recipe.instructions == ["Mix the dry ingredients: flour and salt", "Bake"]

    def test_instructions_before_ingredients(self):
        recipe = parse_recipe("Method:\n1. Toast the spices\nIngredients:\n- cumin")
        assert recipe.instructions == ["Toast the spices"]
        assert recipe.ingredients == ["cumin"]

    def test_bold_line_is_not_a_bullet(self):
        recipe = parse_recipe("Ingredients:\n**Garnish**: mint")
        assert recipe.ingredients == ["**Garnish**: mint"]


# ── Recommendation extraction ────────────────────────────────────────────


class TestExtractRecommendations:
    def test_grilled_salmon(self):
        recs = extract_recommendations(SALMON)
        assert len(recs) == 1
        assert recs[0].title == "Grilled Salmon"
        assert recs[0].recipe.ingredients == ["salmon", "lemon"]
        assert recs[0].recipe.instructions == ["Grill", "Serve"]

    def test_multiple_blocks(self):
        text = (
            "Here are two ideas.\n\n"
            "Recipe: **Smoked Old Fashioned** A smoky twist.\n\n"
            "Recommendation: **Cross-train line cooks** Cuts overtime on busy nights."
        )
        recs = extract_recommendations(text)
        assert [r.title for r in recs] == ["Smoked Old Fashioned", "Cross-train line cooks"]
        assert recs[0].description == "A smoky twist."
        assert recs[1].description == "Cuts overtime on busy nights."
        assert recs[0].recipe is None

    def test_markers_are_case_insensitive(self):
        recs = extract_recommendations("RECIPE: **Beet Salad** roasted beets\nrecommendation: **Soup** hot")
        assert [r.title for r in recs] == ["Beet Salad", "Soup"]

    def test_last_block_runs_to_end(self):
        recs = extract_recommendations("Recipe: **Tart** Ingredients:\n- pastry\n- apples")
        assert recs[0].recipe.ingredients == ["pastry", "apples"]

    def test_title_is_trimmed(self):
        recs = extract_recommendations("Recipe: **  Crab Cakes  ** crispy")
        assert recs[0].title == "Crab Cakes"

    def test_long_description_truncated(self):
        recs = extract_recommendations("Recipe: **Stew** " + "x" * 300)
        assert len(recs[0].description) == 203
        assert recs[0].description.endswith("...")

    def test_fifty_chars_without_markers_is_empty(self):
        assert extract_recommendations("a" * 50) == []

    def test_fifty_one_chars_gives_fallback(self):
        recs = extract_recommendations("a" * 51)
        assert len(recs) == 1
        assert recs[0].title == "a" * 50
        assert recs[0].description == "a" * 51
        assert recs[0].recipe is None

    def test_fallback_title_strips_markdown(self):
        text = "## **Seasonal Menu Refresh**\nRotate three mains every quarter to keep regulars curious."
        recs = extract_recommendations(text)
        assert recs[0].title == "Seasonal Menu Refresh"

    def test_fallback_default_title(self):
        text = "***\n" + "Keep the walk-in organised by use-by date and label everything." * 2
        recs = extract_recommendations(text)
        assert recs[0].title == "Chef Recommendation"

    def test_fallback_description_truncated(self):
        recs = extract_recommendations("word " * 100)
        assert len(recs[0].description) == 203
        assert recs[0].description.endswith("...")

    def test_empty_text(self):
        assert extract_recommendations("") == []

    def test_idempotent(self):
        assert extract_recommendations(SALMON) == extract_recommendations(SALMON)


def test_truncate_short_text_unchanged():
    assert truncate("short") == "short"
    assert truncate("y" * 200) == "y" * 200
