# services/texts.py
"""
Reference passages for an assessment attempt.

Passages come from the built-in catalog below, or from a text generator the
host plugs in. A generator that fails or returns nothing is replaced by the
catalog passage for the same topic.
"""
from __future__ import annotations
import logging
from typing import Callable, Dict, Optional

log = logging.getLogger(__name__)

TextGenerator = Callable[[str], str]

DEFAULT_TOPIC = "Official Assessment: Hardware"
DIFFICULTIES = ("Easy", "Medium", "Hard")

CS_STATIC_TEXTS: Dict[str, str] = {
    "Official Assessment: Hardware": (
        "A computer system consists of hardware and software working together. "
        "The Central Processing Unit is the primary component that executes instructions. "
        "It contains an Arithmetic Logic Unit for calculations and a Control Unit to manage data flow. "
        "Primary memory, known as RAM, stores data currently in use, while secondary storage like "
        "hard drives provides long-term retention. Input devices like keyboards and output devices "
        "like monitors allow human interaction with the machine."
    ),
    "Official Assessment: Networking": (
        "Computer networks allow multiple devices to share resources and communicate. "
        "The Internet is a vast network of networks using the TCP/IP protocol suite. "
        "Each device is identified by a unique IP address. Routers are responsible for forwarding "
        "data packets between different networks. Local Area Networks cover small areas like a "
        "single room or building, while Wide Area Networks can span across cities or countries. "
        "Security protocols like encryption help protect data during transmission."
    ),
    "Official Assessment: Logic & Code": (
        "Programming involves creating a set of instructions for a computer to follow. "
        "Algorithms are step-by-step procedures used for calculations and data processing. "
        "High-level languages like Python or Java are designed to be easy for humans to read and write. "
        "Compilers and interpreters translate this code into machine language that the CPU can execute. "
        "Logical structures like loops and conditionals allow programs to make decisions and repeat "
        "tasks efficiently."
    ),
    "Official Assessment: Cybersecurity": (
        "Cybersecurity is the practice of protecting systems and networks from digital attacks. "
        "Common threats include malware, phishing, and denial-of-service attacks. "
        "Strong passwords and multi-factor authentication are essential for verifying user identity. "
        "Firewalls act as barriers between trusted and untrusted networks. "
        "Data privacy is a fundamental right, and encryption is used to ensure that sensitive "
        "information remains unreadable to unauthorized parties."
    ),
}


def topics():
    return list(CS_STATIC_TEXTS)


def get_static_text(topic: str) -> str:
    return CS_STATIC_TEXTS.get(topic) or CS_STATIC_TEXTS[DEFAULT_TOPIC]


def build_text_prompt(topic: str, difficulty: str) -> str:
    return (
        f"Short typing test paragraph about {topic}. Level: {difficulty}. "
        "Limit: 100 words. No intro/outro. Direct text only."
    )


def generate_typing_text(topic: str, difficulty: str = "Medium",
                         generator: Optional[TextGenerator] = None) -> str:
    """Ask ``generator`` for a fresh passage, falling back to the catalog."""
    if generator is None:
        return get_static_text(topic)
    try:
        text = (generator(build_text_prompt(topic, difficulty)) or "").strip()
    except Exception as e:
        log.warning("Text generation failed for %r, using catalog text: %s", topic, e)
        return get_static_text(topic)
    if not text:
        log.warning("Text generator returned nothing for %r, using catalog text", topic)
        return get_static_text(topic)
    return text
