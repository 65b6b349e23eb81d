# i18n.py

import re

PLACEHOLDER_PATTERN = re.compile(r"\$\$(\S*?)\$\$")

enEN = {
    "system": {
        "unknownError": {
            "title": "Unknown error",
            "description": "Unknown error, please contact an administrator",
        },
        "notInitialized": {
            "title": "DBE is not initialized",
            "description": "Run `/dbeinit` in the channel DBE should use before creating events.",
        },
        "wrongChannel": {
            "title": "Wrong channel",
            "description": "Events can only be managed in <#$$channel$$>.",
        },
        "notFound": {
            "title": "Event not found",
            "description": "No event is bound to this message.",
        },
        "permissionDenied": {
            "title": "Permission denied",
            "description": "Only the author of the event or an administrator can delete it.",
        },
    },
    "init": {
        "create": {
            "title": "Initialization successful !",
            "description": "Thanks for initializing DBE !\n DBE will only analyse messages on this channel",
        },
        "update": {
            "title": "DBE configuration updated",
            "description": "DBE configuration has been updated",
        },
        "errors": {
            "badLang": {
                "title": "Bad language",
                "description": "The given language isn't currently supported, please use one of the following:\n$$langs$$",
            },
        },
    },
    "new": {
        "success": {
            "title": "Event created",
            "description": "Your event **$$title$$** has been created.",
        },
        "errors": {
            "badFormat": {
                "title": "Error in the command !",
                "description": "The date must be `dd/mm/yyyy` and the time `HH:MM`.\nUse `/help` for the list of commands.",
            },
            "past": {
                "title": "Invalid date",
                "description": "The event must be set in the future",
            },
        },
    },
    "delete": {
        "success": {
            "title": "Event deleted",
            "description": "The event has been deleted",
        },
    },
    "help": {
        "title": "DBE commands",
        "description": (
            "`/newevent date time title description [image]`: create an event (`dd/mm/yyyy` `HH:MM`)\n"
            "`/deleteevent message_id`: delete one of your events\n"
            "`/dbeinit lang`: use this channel for events\n\n"
            "React with $$valid$$ to join an event, remove it to leave, $$delete$$ to delete it."
        ),
    },
    "embed": {
        "credits": " | Discord Bot Events",
        "event": {
            "description": "$$description$$ \n\n **Day**: $$day$$ \n **Time**: $$time$$ \n\n **Participants**:$$participants$$",
            "noPeople": "\n- No participant",
        },
    },
}

frFR = {
    "system": {
        "unknownError": {
            "title": "Erreur inconnue",
            "description": "Erreur inconnue, merci de contacter un administrateur",
        },
        "notInitialized": {
            "title": "DBE n'est pas initialisé",
            "description": "Lancez `/dbeinit` dans le salon que DBE doit utiliser avant de créer des événements.",
        },
        "wrongChannel": {
            "title": "Mauvais salon",
            "description": "Les événements se gèrent uniquement dans <#$$channel$$>.",
        },
        "notFound": {
            "title": "Événement introuvable",
            "description": "Aucun événement n'est lié à ce message.",
        },
        "permissionDenied": {
            "title": "Permission refusée",
            "description": "Seul l'auteur de l'événement ou un administrateur peut le supprimer.",
        },
    },
    "init": {
        "create": {
            "title": "Initialisation réussie !",
            "description": "Merci d'avoir initialisé DBE !\n DBE analysera uniquement les messages de ce salon",
        },
        "update": {
            "title": "Configuration de DBE mise à jour",
            "description": "La configuration de DBE a été mise à jour",
        },
        "errors": {
            "badLang": {
                "title": "Langue invalide",
                "description": "Cette langue n'est pas supportée, merci d'utiliser l'une des suivantes :\n$$langs$$",
            },
        },
    },
    "new": {
        "success": {
            "title": "Événement créé",
            "description": "Votre événement **$$title$$** a été créé.",
        },
        "errors": {
            "badFormat": {
                "title": "Erreur dans la commande !",
                "description": "La date doit être au format `jj/mm/aaaa` et l'heure `HH:MM`.\nUtilisez `/help` pour la liste des commandes.",
            },
            "past": {
                "title": "Date invalide",
                "description": "L'événement doit être dans le futur",
            },
        },
    },
    "delete": {
        "success": {
            "title": "Événement supprimé",
            "description": "L'événement a été supprimé",
        },
    },
    "help": {
        "title": "Commandes DBE",
        "description": (
            "`/newevent date heure titre description [image]` : créer un événement (`jj/mm/aaaa` `HH:MM`)\n"
            "`/deleteevent message_id` : supprimer un de vos événements\n"
            "`/dbeinit langue` : utiliser ce salon pour les événements\n\n"
            "Réagissez avec $$valid$$ pour participer, retirez-la pour vous désinscrire, $$delete$$ pour supprimer."
        ),
    },
    "embed": {
        "credits": " | Discord Bot Events",
        "event": {
            "description": "$$description$$ \n\n **Jour** : $$day$$ \n **Heure** : $$time$$ \n\n **Participants** :$$participants$$",
            "noPeople": "\n- Aucun participant",
        },
    },
}

LANGS = {
    "enEN": enEN,
    "frFR": frFR,
}


def get_lang(lang):
    """Language pack for ``lang``, falling back to English."""
    return LANGS.get(lang, enEN)


def is_supported_lang(lang):
    return lang in LANGS


def parse_lang_message(message, args):
    """Replace every ``$$key$$`` placeholder in ``message`` with ``args[key]``."""
    def replace(match):
        key = match.group(1)
        return str(args.get(key, ""))
    return PLACEHOLDER_PATTERN.sub(replace, message)


def get_text(lang, path):
    """Look up a dotted key such as ``"new.errors.past"`` in a language pack."""
    node = get_lang(lang)
    for part in path.split("."):
        node = node[part]
    return node
