"""
Constantes utilisées pour la segmentation et la manipulation des pages HTML.
"""

# Classe CSS des placeholders (tokens) insérés à la place du texte
TOKEN_CLASS = "wt-token"

# Classe ajoutée aux tokens dont la traduction a échoué
TOKEN_FAILED_CLASS = "wt-token--failed"

# Attribut portant le texte source encodé en base64
SOURCE_ATTRIBUTE = "data-source"

# Style du squelette : texte masqué en attendant la traduction
TOKEN_STYLE = (
    "background-color: #f8f9fa; color: transparent; "
    "border-bottom: 2px solid #eaecf0; transition: all 0.5s ease;"
)

# Style d'un token en échec (visible, distinct de l'état "non traduit")
TOKEN_FAILED_STYLE = (
    "animation: none; background: #ffdddd; border: 1px solid red; cursor: help;"
)

TOKEN_FAILED_TITLE = "Translation failed."

# Balises supprimées entièrement de la sortie
REMOVED_TAGS = {"style", "script", "link", "meta"}

# Sous-arbres opaques : (balise, fragment de classe). Laissés intacts.
OPAQUE_ELEMENTS = (
    ("sup", "reference"),
    ("span", "mw-editsection"),
)

# Classe des liens vers des pages inexistantes
MISSING_LINK_CLASS = "new"

# Espaces de noms hors contenu : les liens vers eux ne sont pas localisés
EXCLUDED_NAMESPACES = (
    "Special",
    "File",
    "Image",
    "Category",
    "Template",
    "Help",
    "User",
    "Talk",
    "MediaWiki",
    "Module",
    "Portal",
    "Draft",
    "Project",
)

# Balise de découpage en sections
SECTION_HEADING = "h2"
