"""Core constants: project phase template, storage prefixes and fixed keys.

Single source of truth for the ten project phases. Titles and
descriptions are shown to end users and stay in Portuguese.
"""

PHASE_COUNT = 10
FIRST_PHASE_ID = 1

# (id, title, description)
PHASE_DEFINITIONS: tuple[tuple[int, str, str], ...] = (
    (1, "Diagnóstico e Planejamento",
     "Coleta de informações iniciais e definição dos objetivos da holding."),
    (2, "Constituição da Holding",
     "Definição do quadro societário, elaboração do contrato social e registro da empresa."),
    (3, "Coleta de Dados para Integralização",
     "Declaração dos bens que serão transferidos para o capital social da holding."),
    (4, "Minuta de Integralização",
     "Elaboração e revisão da minuta do contrato de integralização dos bens."),
    (5, "Pagamento do ITBI",
     "Processamento do Imposto sobre Transmissão de Bens Imóveis (ITBI), se aplicável."),
    (6, "Registro da Integralização",
     "Registro da transferência dos bens no cartório de registro de imóveis competente."),
    (7, "Conclusão e Entrega",
     "Entrega do dossiê final com todos os documentos e registros concluídos."),
    (8, "Transferência de Quotas",
     "Processo de doação ou venda de quotas sociais para herdeiros ou terceiros."),
    (9, "Acordo de Sócios",
     "Elaboração do acordo para regular as relações entre os sócios da holding."),
    (10, "Suporte e Alterações",
     "Canal para solicitações de alterações, dúvidas e suporte contínuo após a conclusão do projeto."),
)

# Initial data for phases without their own table (4..10)
PHASE_DEFAULT_DATA: dict[int, dict] = {
    4: {"analysis_drafts": [], "discussion": [], "status": "pending_draft", "approvals": {}},
    5: {"itbi_processes": []},
    6: {"registration_processes": []},
    7: {"status": "pending"},
    8: {"transfer_processes": []},
    9: {
        "drafts": [],
        "discussion": [],
        "status": "pending_draft",
        "approvals": {},
        "documents": {"agreement": None},
        "included_clauses": [],
    },
    10: {"requests": []},
}

# Object storage path prefixes
STORAGE_PREFIX_PROJECTS = "projects"
STORAGE_PREFIX_CONTRACTS = "contracts"

# Key under which the session is persisted locally
SESSION_CACHE_KEY = "planejar_session"
