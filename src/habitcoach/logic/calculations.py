from habitcoach.logic.models import MacroGoals, UserProfile
from typing import Union, Optional
import math

# --- CONTROL PARAMETERS ---
ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}
PROTEIN_G_PER_KG = 1.8
FAT_CALORIE_SHARE = 0.25
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9

# --- TDEE CALCULATION FORMULAS ---
def calculate_bmr(profile: UserProfile) -> float:
    """Calculate BMR using the revised Harris-Benedict equation."""
    if profile.sex == "male":
        return 88.362 + (13.397 * profile.weight_kg) + (4.799 * profile.height_cm) - (5.677 * profile.age)
    return 447.593 + (9.247 * profile.weight_kg) + (3.098 * profile.height_cm) - (4.330 * profile.age)

def calculate_tdee(profile: UserProfile) -> float:
    """Calculate TDEE from BMR and the profile's activity level."""
    return calculate_bmr(profile) * ACTIVITY_MULTIPLIERS[profile.activity_level]

def calculate_macro_goals(profile: UserProfile) -> MacroGoals:
    """
    Daily targets from TDEE: protein scales with body weight, fat takes a fixed
    share of calories and carbs fill the remainder.
    """
    tdee = calculate_tdee(profile)
    protein_g = profile.weight_kg * PROTEIN_G_PER_KG
    fat_calories = tdee * FAT_CALORIE_SHARE
    fat_g = fat_calories / KCAL_PER_G_FAT
    carbs_g = (tdee - protein_g * KCAL_PER_G_PROTEIN - fat_calories) / KCAL_PER_G_CARBS

    return MacroGoals(
        calories=round(tdee),
        protein_g=round(protein_g),
        carbs_g=round(carbs_g),
        fats_g=round(fat_g),
    )

def safe_float(value: Optional[Union[float, int, str]], default: float = 0.0) -> float:
    """Coerce user-entered numbers; unparseable or missing values give `default`."""
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            parsed = float(value)
        except ValueError:
            return default
        return default if math.isnan(parsed) else parsed
    return default
