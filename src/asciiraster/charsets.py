# Ramps are ordered sparse to dense: index 0 is drawn for black, the last index for white.
STANDARD = " .:-=+*#%@"

DETAILED = " .'`^\",:;Il!i><~+_-?][}{1)(|\\/tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$"

MINIMAL = " .-+*#"

# Block elements: light, medium and dark shade, full block
BLOCKS = " ░▒▓█"

RAMPS = {
    "standard": STANDARD,
    "detailed": DETAILED,
    "minimal": MINIMAL,
    "blocks": BLOCKS,
}
