"""
Built-in story templates offered to every user
"""

from typing import List, Optional

from storybook.schemas.story import PremadePage, PremadeStory


def _pages(*entries) -> List[PremadePage]:
    return [
        PremadePage(page_number=i, text=text, drawing_prompt=prompt)
        for i, (text, prompt) in enumerate(entries, start=1)
    ]


PREMADE_STORIES: List[PremadeStory] = [
    PremadeStory(
        id="sample1",
        title="The Magic Forest Adventure",
        description="Help Luna find her lost magic wand",
        age_group="Ages 4-8",
        category="Fantasy",
        pages=_pages(
            ("Luna the fairy lived in a magic forest.", "Draw Luna with sparkly wings"),
            ("Her magic wand went missing!", "Draw Luna looking worried"),
            ("She found it by the crystal waterfall.", "Draw the sparkling waterfall"),
        ),
    ),
    PremadeStory(
        id="sample2",
        title="Twinkle the Unicorn and Belle Belle",
        description="A magical friendship between a unicorn from Starwhirl and a girl on Earth",
        age_group="Ages 4-10",
        category="Fantasy",
        pages=_pages(
            (
                "High above the clouds, in a land called Starwhirl, lived a magical unicorn named Twinkle. "
                "She had a glittery mane, wings made of light, and hooves that sparkled like diamonds. "
                "But even in a kingdom full of magic, Twinkle felt lonely.",
                "Draw Twinkle the unicorn with her glittery mane and sparkling wings in the magical land of Starwhirl",
            ),
            (
                "One night, Twinkle saw a small blue planet through her stardust telescope. "
                "She read that Earth had something she'd never found before—a best friend. "
                "With a burst of rainbow wind, she galloped into the sky and flew toward Earth.",
                "Draw Twinkle looking through her stardust telescope at the blue planet Earth",
            ),
            (
                "Twinkle landed in a quiet field filled with daisies and butterflies. "
                "The sky was warm, the breeze was soft, and everything smelled like strawberries. "
                "She whispered, \"This place feels special.\"",
                "Draw a beautiful field with daisies, butterflies, and Twinkle landing softly",
            ),
            (
                "In the distance, she saw a girl spinning in circles and singing to the clouds. "
                "The girl wore a sparkly dress and had the brightest smile Twinkle had ever seen. "
                "\"Who is that?\" Twinkle whispered, hiding behind a tree.",
                "Draw Belle Belle spinning and singing in her sparkly dress while Twinkle peeks from behind a tree",
            ),
            (
                "The girl spotted Twinkle's shimmer and gasped with joy. "
                "She ran closer and shouted, \"A unicorn! Are you real?\" Twinkle stepped out and nodded gently.",
                "Draw the moment Belle Belle discovers Twinkle, with excitement and wonder on her face",
            ),
            (
                "\"My name's Belle Belle!\" the girl said, twirling in excitement. "
                "\"I'm Twinkle,\" the unicorn replied with a smile. And just like that, magic swirled between them.",
                "Draw Belle Belle and Twinkle meeting for the first time with magical sparkles swirling around them",
            ),
            (
                "Belle Belle brushed Twinkle's mane with her fingers and whispered, \"You're beautiful.\" "
                "Twinkle giggled, \"You're the kindest human I've ever met!\" "
                "They both felt a warm flutter in their hearts.",
                "Draw Belle Belle gently brushing Twinkle's glittery mane with both of them smiling happily",
            ),
            (
                "They played all afternoon—running through flower fields, chasing butterflies, and laughing. "
                "Twinkle showed Belle Belle how to slide on rainbows and bounce on clouds. "
                "Belle Belle showed Twinkle how to eat popsicles and do cartwheels.",
                "Draw Twinkle and Belle Belle playing together - sliding on rainbows, bouncing on clouds, or sharing popsicles",
            ),
            (
                "Twinkle had never laughed so hard in her life. Belle Belle's cheeks hurt from smiling. "
                "They both shouted at the same time, \"You're my BEST friend!\"",
                "Draw both friends laughing joyfully together with big smiles and happy expressions",
            ),
            (
                "As the sun began to set, Twinkle's horn sparkled with starlight. "
                "\"I have to return to Starwhirl before the moon rises,\" she said softly. "
                "Belle Belle's eyes filled with sparkly tears.",
                "Draw the sunset scene with Twinkle's horn glowing and Belle Belle looking sad but understanding",
            ),
            (
                "\"I don't want you to go,\" Belle Belle whispered. Twinkle nuzzled her gently. "
                "\"We'll always be connected by the stars.\"",
                "Draw Twinkle nuzzling Belle Belle tenderly as they share this emotional moment",
            ),
            (
                "Belle Belle took off her favorite charm bracelet and placed it around Twinkle's horn. "
                "\"Now you'll always remember me.\" Twinkle gave her a glowing feather from her wing.",
                "Draw the gift exchange - Belle Belle placing her bracelet on Twinkle's horn and receiving a glowing feather",
            ),
            (
                "With one last hug, Twinkle galloped into the sky, leaving a trail of glitter and love. "
                "Belle Belle waved until the sparkles faded into the stars. "
                "She whispered, \"Thank you for being my magical friend.\"",
                "Draw Twinkle flying away into the starry sky with a glittery trail while Belle Belle waves goodbye",
            ),
            (
                "Back in Starwhirl, Twinkle placed the bracelet on her cloud shelf and smiled. "
                "She told every unicorn about Belle Belle, Earth, and popsicles. "
                "But most of all, she talked about what it means to find a true friend.",
                "Draw Twinkle in Starwhirl showing the bracelet to other unicorns and sharing her story",
            ),
            (
                "Every night, Belle Belle looks up at the stars and finds the brightest one. "
                "She blows a kiss and says, \"Goodnight, Twinkle.\" "
                "And far above, a rainbow spark glows back just for her.",
                "Draw Belle Belle looking up at the night sky, blowing a kiss to the brightest star that sparkles back at her",
            ),
        ),
    ),
]


def list_premade_stories() -> List[PremadeStory]:
    return list(PREMADE_STORIES)


def get_premade_story(story_id: str) -> Optional[PremadeStory]:
    return next((s for s in PREMADE_STORIES if s.id == story_id), None)
