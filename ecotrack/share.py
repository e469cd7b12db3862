# ecotrack/share.py
import io
from urllib.parse import quote

from PIL import Image, ImageDraw, ImageFont

CARD_SIZE = (600, 350)
CARD_BG = (22, 163, 74)
CARD_FG = (255, 255, 255)


def share_text(points, carbon_kg):
    return (
        f"I've earned {points} eco-points and reduced my carbon footprint by {carbon_kg:.1f} kg CO₂ "
        "with EcoTrack! Join me in tracking and reducing your environmental impact. 🌍🌱"
    )


def share_links(points, carbon_kg, share_url):
    short = f"I've earned {points} eco-points and reduced my carbon footprint by {carbon_kg:.1f} kg CO₂ with EcoTrack! 🌍"
    with_link = f"{short}\n\nJoin me: {share_url}"
    return {
        "whatsapp": f"https://wa.me/?text={quote(with_link)}",
        "telegram": f"https://t.me/share/url?url={quote(share_url)}&text={quote(short)}",
        "twitter": f"https://twitter.com/intent/tweet?text={quote(with_link)}",
        "facebook": f"https://www.facebook.com/sharer/sharer.php?u={quote(share_url)}&quote={quote(share_text(points, carbon_kg))}",
        "linkedin": f"https://www.linkedin.com/sharing/share-offsite/?url={quote(share_url)}",
    }


def render_share_card(username, points, carbon_kg):
    """Draw the achievement card and return it as PNG bytes."""
    img = Image.new("RGB", CARD_SIZE, CARD_BG)
    draw = ImageDraw.Draw(img)
    font = ImageFont.load_default()
    lines = [
        "EcoTrack",
        f"{username}",
        f"{points} eco-points",
        f"{carbon_kg:.1f} kg CO2 tracked",
        "Track your footprint. Shrink your impact.",
    ]
    y = 60
    for line in lines:
        draw.text((50, y), line, fill=CARD_FG, font=font)
        y += 50
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
