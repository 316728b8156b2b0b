"""User-facing strings in English and French.

Textes de l'interface en anglais et en français.
"""
from typing import Dict

DEFAULT_LANG = "en"

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "report_title": "🛰️ immprune - {count} files are safe to delete from iCloud Photos",
        "report_scan": "Scan: {timestamp}",
        "batch_header": "📦 Batch {start}-{end} | {count} candidates",
        "scan_immich": "🔭 Scanning Immich assets",
        "scan_immich_done": "Immich scan complete ({count} assets)",
        "scan_photos": "🧩 Reading Apple Photos library",
        "scan_photos_done": "Apple Photos scan complete ({count} assets)",
        "step_failed": "💥 {label} failed",
        "matching": "🧮 Matching",
        "matching_done": "🧮 Matching complete: {count} safe candidates in {elapsed}",
        "ambiguous": "⚠️  {count} assets skipped: several Immich assets share their name and date",
        "checksumming": "🔐 Hashing local files",
        "writing_batches": "📚 Writing {count} batches",
        "batch_progress": "🔹 Batch {index}/{total}: {start}-{end}",
        "batch_written": "📝 Batch {start}-{end} written in {elapsed}",
        "output_ready": "🧾 Output file ready → {path} (delete from top to bottom)",
        "err_input": "❌ Input error: {error}",
        "err_config": "Configuration error: {error}",
        "err_remote": "Immich: {error}",
        "err_platform": "Apple Photos is only supported on macOS for now ({error})",
        "err_tool_missing": "{tool} is not installed or not in PATH",
        "err_access": "Unable to read the Photos library (check Photos/Automation permissions): {error}",
        "err_parse": "Invalid Photos response: {error}",
        "setup_title": "🔧 First run - immprune setup",
        "setup_hint": "Create an Immich API key with the 'asset.read' permission (Account Settings → API Keys).",
        "setup_url": "Immich URL (example: https://immich.yourdomain.com)",
        "setup_key": "Immich API key",
        "setup_written": "✅ Secure config written to {path}",
        "wizard_title": "🪄 Smart compare wizard",
        "wizard_scope": "Content scope",
        "wizard_scope_all": "All photos and videos",
        "wizard_scope_videos": "Videos only",
        "wizard_style": "Check style",
        "wizard_style_single": "Single pass",
        "wizard_style_batches": "Year batches",
        "wizard_start_year": "Start year",
        "wizard_end_year": "End year",
        "wizard_batch_years": "Years per batch",
        "wizard_limit": "Limit per batch (0 = no limit)",
        "wizard_output": "Output file",
    },
    "fr": {
        "report_title": "🛰️ immprune - {count} fichiers peuvent être supprimés d'iCloud Photos",
        "report_scan": "Analyse : {timestamp}",
        "batch_header": "📦 Lot {start}-{end} | {count} candidats",
        "scan_immich": "🔭 Analyse des fichiers Immich",
        "scan_immich_done": "Analyse Immich terminée ({count} fichiers)",
        "scan_photos": "🧩 Lecture de la photothèque Apple Photos",
        "scan_photos_done": "Analyse Apple Photos terminée ({count} fichiers)",
        "step_failed": "💥 Échec : {label}",
        "matching": "🧮 Comparaison",
        "matching_done": "🧮 Comparaison terminée : {count} candidats sûrs en {elapsed}",
        "ambiguous": "⚠️  {count} fichiers ignorés : plusieurs fichiers Immich ont le même nom et la même date",
        "checksumming": "🔐 Calcul des empreintes locales",
        "writing_batches": "📚 Écriture de {count} lots",
        "batch_progress": "🔹 Lot {index}/{total} : {start}-{end}",
        "batch_written": "📝 Lot {start}-{end} écrit en {elapsed}",
        "output_ready": "🧾 Fichier prêt → {path} (supprimer de haut en bas)",
        "err_input": "❌ Erreur de saisie : {error}",
        "err_config": "Erreur de configuration : {error}",
        "err_remote": "Immich : {error}",
        "err_platform": "Apple Photos n'est pris en charge que sur macOS pour l'instant ({error})",
        "err_tool_missing": "{tool} n'est pas installé ou absent du PATH",
        "err_access": "Impossible de lire la photothèque (vérifiez les autorisations Photos/Automatisation) : {error}",
        "err_parse": "Réponse Photos invalide : {error}",
        "setup_title": "🔧 Premier lancement - configuration d'immprune",
        "setup_hint": "Créez une clé API Immich avec la permission 'asset.read' (Paramètres du compte → Clés API).",
        "setup_url": "URL Immich (exemple : https://immich.mondomaine.com)",
        "setup_key": "Clé API Immich",
        "setup_written": "✅ Configuration sécurisée écrite dans {path}",
        "wizard_title": "🪄 Assistant de comparaison",
        "wizard_scope": "Contenu",
        "wizard_scope_all": "Toutes les photos et vidéos",
        "wizard_scope_videos": "Vidéos uniquement",
        "wizard_style": "Mode de vérification",
        "wizard_style_single": "Passe unique",
        "wizard_style_batches": "Lots par années",
        "wizard_start_year": "Année de début",
        "wizard_end_year": "Année de fin",
        "wizard_batch_years": "Années par lot",
        "wizard_limit": "Limite par lot (0 = illimité)",
        "wizard_output": "Fichier de sortie",
    },
}

LANGUAGES = tuple(MESSAGES)


def normalize_lang(lang: str) -> str:
    lang = (lang or "").strip().lower()[:2]
    return lang if lang in MESSAGES else DEFAULT_LANG


def t(lang: str, key: str, **kwargs) -> str:
    table = MESSAGES[normalize_lang(lang)]
    text = table.get(key) or MESSAGES[DEFAULT_LANG][key]
    return text.format(**kwargs) if kwargs else text
