"""Gemini 植物信息提示词与返回结构。"""

PLANT_INFO_SCHEMA = """{
  "basicInfo": {
    "scientificName": "Scientific name",
    "family": "Plant family",
    "origin": "Native region",
    "growthRate": "Slow/Moderate/Fast",
    "matureSize": {
      "height": "Height in cm",
      "width": "Width in cm"
    },
    "toxicity": {
      "level": "Non-toxic/Toxic",
      "affected": "Pets/Humans/Both/None",
      "symptoms": "Symptoms if ingested",
      "firstAid": "First aid measures"
    }
  },
  "careGuide": {
    "watering": {
      "frequency": "How often to water",
      "method": "How to water",
      "signs": {
        "overwatered": "Signs of overwatering",
        "underwatered": "Signs of underwatering"
      }
    },
    "light": {
      "requirements": "Light requirements",
      "tolerance": "Light tolerance",
      "idealLocation": "Ideal placement"
    },
    "environment": {
      "temperature": {
        "ideal": "Ideal temperature range",
        "minTemp": "Minimum temperature",
        "maxTemp": "Maximum temperature"
      },
      "humidity": "Humidity requirements"
    },
    "soil": {
      "type": "Soil type",
      "ph": "pH range",
      "drainage": "Drainage needs"
    },
    "feeding": {
      "fertilizer": "Fertilizer type",
      "schedule": "Feeding schedule"
    },
    "maintenance": {
      "pruning": "Pruning needs",
      "repotting": "Repotting frequency",
      "cleaning": "Leaf cleaning instructions"
    }
  },
  "seasonalCare": {
    "spring": "Spring care",
    "summer": "Summer care",
    "fall": "Fall care",
    "winter": "Winter care"
  },
  "commonIssues": [
    {
      "problem": "Problem name",
      "symptoms": "Visible symptoms",
      "solution": "How to fix",
      "prevention": "How to prevent"
    }
  ],
  "propagation": {
    "methods": ["Method 1", "Method 2"],
    "bestTime": "Best time to propagate",
    "difficulty": "Easy/Moderate/Difficult"
  },
  "additionalInfo": {
    "funFacts": ["Fact 1", "Fact 2"],
    "commonUses": ["Use 1", "Use 2"]
  }
}"""


def build_plant_info_prompt(plant_name: str) -> str:
    return f"""You are a professional botanist. Provide comprehensive information about the {plant_name} plant in a structured JSON format.

IMPORTANT:
1. Be specific to the {plant_name} species. If unsure, note this and provide general info.
2. Include both care instructions and plant details in one response.
3. Be concise but thorough.
4. Use metric measurements by default.
5. Only return valid JSON, no other text.
6. Keep responses informative but concise.
7. Use bullet points for lists in string fields.
8. If information is unknown, use "Unknown" or an empty string.

Follow this exact JSON structure:
{PLANT_INFO_SCHEMA}"""
