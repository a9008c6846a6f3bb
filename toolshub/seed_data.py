"""Default tool catalog, used to seed the fallback store and the database."""
from datetime import datetime, timezone
from typing import Any, Dict, List

CATEGORIES = (
    "Utility Tools",
    "AI Tools",
    "Online Calculators",
    "Text Tools",
    "Image Tools",
    "Developer Tools",
    "Converter Tools",
)

# (name, description, category, url, icon, popularity)
DEFAULT_TOOLS = [
    ("Password Generator", "Generate secure passwords with customizable options", "Utility Tools", "/tools/password-generator", "key", 120),
    ("QR Code Generator", "Create custom QR codes for websites, text, and contact information", "Utility Tools", "/tools/qr-generator", "qrcode", 95),
    ("File Converter", "Convert files between different formats (PDF, DOC, JPG, etc.)", "Utility Tools", "/tools/file-converter", "file-export", 87),
    ("Unit Converter", "Convert measurements between various units (length, weight, temperature)", "Utility Tools", "/tools/unit-converter", "exchange-alt", 103),
    ("URL Shortener", "Create short, memorable URLs from long web addresses", "Utility Tools", "/tools/url-shortener", "link", 115),
    ("Text Editor", "Simple online text editor with formatting options", "Utility Tools", "/tools/text-editor", "edit", 78),
    ("Note Taking App", "Quick note taking with sync across devices", "Utility Tools", "/tools/notes", "sticky-note", 85),
    ("Timer & Stopwatch", "Precision timer and stopwatch for all your timing needs", "Utility Tools", "/tools/timer", "stopwatch", 92),
    ("Scientific Calculator", "Advanced calculator with trigonometric, logarithmic, and statistical functions", "Online Calculators", "/tools/scientific-calculator", "calculator", 78),
    ("Financial Calculator", "Calculate loans, investments, interest rates, and financial planning", "Online Calculators", "/tools/financial-calculator", "money-bill-wave", 89),
    ("BMI Calculator", "Calculate Body Mass Index and assess health metrics", "Online Calculators", "/tools/bmi-calculator", "weight", 112),
    ("Age Calculator", "Calculate age in years, months, days from birthdate", "Online Calculators", "/tools/age-calculator", "birthday-cake", 67),
    ("Mortgage Calculator", "Calculate mortgage payments and compare loan options", "Online Calculators", "/tools/mortgage-calculator", "home", 74),
    ("Tax Calculator", "Calculate taxes based on income and deductions", "Online Calculators", "/tools/tax-calculator", "balance-scale", 63),
    ("Tip Calculator", "Quickly calculate tips for restaurants and services", "Online Calculators", "/tools/tip-calculator", "hand-holding-usd", 81),
    ("Fuel Cost Calculator", "Calculate fuel costs for trips based on distance and vehicle efficiency", "Online Calculators", "/tools/fuel-cost-calculator", "gas-pump", 56),
    ("Text Formatter", "Format and clean up text with various styling options", "Text Tools", "/tools/text-formatter", "font", 91),
    ("Case Converter", "Change text case (uppercase, lowercase, title case)", "Text Tools", "/tools/case-converter", "text-height", 76),
    ("Character Counter", "Count characters, words, and lines in text", "Text Tools", "/tools/character-counter", "paragraph", 84),
    ("Spell Checker", "Check spelling and grammar in your text", "Text Tools", "/tools/spell-checker", "spell-check", 73),
    ("Text to Speech", "Convert text to spoken audio", "Text Tools", "/tools/text-to-speech", "volume-up", 69),
    ("Plagiarism Checker", "Check text for potential plagiarism", "Text Tools", "/tools/plagiarism-checker", "search", 58),
    ("Word Counter", "Count words, sentences, and paragraphs", "Text Tools", "/tools/word-counter", "font", 71),
    ("Text Reverser", "Reverse text character by character", "Text Tools", "/tools/text-reverser", "undo", 45),
    ("Image Compressor", "Reduce image file size without losing quality", "Image Tools", "/tools/image-compressor", "compress", 109),
    ("Image Resizer", "Resize images to specific dimensions or percentages", "Image Tools", "/tools/image-resizer", "expand", 98),
    ("Watermark Tool", "Add watermarks to protect your images", "Image Tools", "/tools/watermark-tool", "stamp", 82),
    ("Color Picker", "Select colors from images or create custom palettes", "Image Tools", "/tools/color-picker", "palette", 75),
    ("Image Cropper", "Crop images to specific dimensions or aspect ratios", "Image Tools", "/tools/image-cropper", "crop", 87),
    ("Image Format Converter", "Convert between different image formats (JPG, PNG, GIF, etc.)", "Image Tools", "/tools/image-format-converter", "sync", 79),
    ("Image Brightness Adjuster", "Adjust brightness, contrast, and saturation of images", "Image Tools", "/tools/image-adjuster", "sun", 64),
    ("Screenshot Tool", "Take and annotate screenshots directly in the browser", "Image Tools", "/tools/screenshot-tool", "camera", 52),
    ("JSON Formatter", "Format and validate JSON data with syntax highlighting", "Developer Tools", "/tools/json-formatter", "code", 125),
    ("Regex Tester", "Test regular expressions with live pattern matching", "Developer Tools", "/tools/regex-tester", "search", 118),
    ("Code Minifier", "Minify CSS, JS, and HTML code for better performance", "Developer Tools", "/tools/code-minifier", "cut", 105),
    ("API Testing Tool", "Test and debug API endpoints with a simple interface", "Developer Tools", "/tools/api-testing", "plug", 97),
    ("Base64 Encoder/Decoder", "Encode and decode Base64 strings", "Developer Tools", "/tools/base64", "lock", 88),
    ("HTML Entity Encoder/Decoder", "Encode and decode HTML entities", "Developer Tools", "/tools/html-entities", "code", 72),
    ("Timestamp Converter", "Convert timestamps to and from human-readable dates", "Developer Tools", "/tools/timestamp-converter", "clock", 83),
    ("Hash Generator", "Generate MD5, SHA1, SHA256 hashes for strings", "Developer Tools", "/tools/hash-generator", "hashtag", 77),
    ("Currency Converter", "Convert between different world currencies with live rates", "Converter Tools", "/tools/currency-converter", "dollar-sign", 145),
    ("Time Zone Converter", "Convert time between different time zones around the world", "Converter Tools", "/tools/timezone-converter", "clock", 138),
    ("Temperature Converter", "Convert temperatures between Celsius, Fahrenheit, and Kelvin", "Converter Tools", "/tools/temperature-converter", "thermometer-half", 86),
    ("Binary Converter", "Convert numbers between decimal, binary, octal, and hexadecimal", "Converter Tools", "/tools/binary-converter", "binary", 79),
    ("Data Size Converter", "Convert between different data storage units (KB, MB, GB, etc.)", "Converter Tools", "/tools/data-size-converter", "database", 68),
    ("Speed Converter", "Convert between different speed units (km/h, mph, m/s, etc.)", "Converter Tools", "/tools/speed-converter", "tachometer-alt", 54),
    ("Area Converter", "Convert between different area units (square meters, acres, etc.)", "Converter Tools", "/tools/area-converter", "draw-polygon", 49),
    ("Volume Converter", "Convert between different volume units (liters, gallons, etc.)", "Converter Tools", "/tools/volume-converter", "fill-drip", 57),
]


def default_tool_records(with_ids: bool = True) -> List[Dict[str, Any]]:
    """Build tool documents from DEFAULT_TOOLS.

    With ``with_ids`` the records get the sequential string ids "1".."48" used by
    the fallback store; the database assigns its own ids otherwise.
    """
    created_at = datetime.now(timezone.utc)
    records = []
    for index, (name, description, category, url, icon, popularity) in enumerate(DEFAULT_TOOLS, start=1):
        record = {
            "name": name,
            "description": description,
            "category": category,
            "url": url,
            "icon": icon,
            "popularity": popularity,
            "isActive": True,
            "createdAt": created_at,
        }
        if with_ids:
            record["id"] = str(index)
        records.append(record)
    return records
