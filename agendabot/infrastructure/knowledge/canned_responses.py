from __future__ import annotations

from agendabot.application.ports.knowledge_base import KnowledgeBasePort

CANNED_RESPONSES: dict[str, str] = {
    "saudacoes_e_boas_vindas": (
        "Seja bem-vinda(o) ao consultório da *Nutri Materno-Infantil Sabrina Lagos*❕\n\n"
        "🛜 Aproveite e conheça melhor o trabalho da Nutri pelo Instagram: *@nutrisabrina.lagos*\n"
        "https://www.instagram.com/nutrisabrina.lagos\n\n"
        "*Dicas* para facilitar a nossa comunicação:\n"
        "📵 Esse número não atende ligações;\n"
        "🚫 Não ouvimos áudios;\n"
        "⚠️ Respondemos por ordem de recebimento da mensagem, por isso evite enviar a mesma "
        "mensagem mais de uma vez para não voltar ao final da fila.\n\n"
        "Me conta como podemos te ajudar❓"
    ),
    "introducao_alimentar": (
        "Vou te explicar direitinho como funciona o acompanhamento nutricional da Dra Sabrina, ok? 😉\n\n"
        "A Dra Sabrina vai te ajudar com a introdução alimentar do seu bebê explicando como preparar "
        "os alimentos, quais alimentos devem ou não ser oferecidos nessa fase e de quais formas "
        "oferecê-los, dentre outros detalhes.\n\n"
        "🔹 *5 a 6 meses*: Orientações para iniciar a alimentação.\n"
        "🔹 *7 meses*: Introdução dos alimentos alergênicos e aproveitamento da janela imunológica.\n"
        "🔹 *9 meses*: Evolução das texturas dos alimentos.\n"
        "🔹 *12 meses*: Check-up e orientações para transição à alimentação da família.\n\n"
        "Durante 30 dias após a consulta, você pode tirar dúvidas pelo chat do app. "
        "A Dra. responde semanalmente."
    ),
    "acompanhamento_gestante": (
        "Deixa eu te explicar como funciona o pré natal nutricional da Dra Sabrina.\n\n"
        "A Dra Sabrina vai te ajudar a conduzir a sua gestação de forma saudável, mas sem complicar "
        "a sua rotina e sem mudanças radicais na sua alimentação.\n\n"
        "O foco do acompanhamento nutricional será no ganho de peso recomendado para o trimestre, "
        "no crescimento do bebê e na redução das chances de desenvolver complicações gestacionais.\n\n"
        "Além disso, ela prescreve toda a suplementação necessária durante a gestação, de acordo com "
        "o trimestre, com as necessidades da mamãe e do bebê, e sempre levando em consideração os "
        "resultados dos exames.\n\n"
        "Antes da primeira consulta será enviado um questionário, para que a Dra possa entender melhor "
        "as suas particularidades e, durante a consulta, consiga priorizar as questões mais importantes.\n\n"
        "Na primeira consulta, que dura em torno de 1h, ela vai te ouvir para poder entender a sua "
        "rotina e se aprofundar nas suas necessidades.\n\n"
        "Será aferido o seu peso, altura, circunferências e dobras cutâneas, para concluir seu "
        "Diagnóstico Nutricional e acompanhar a sua evolução de ganho de peso durante a gestação.\n\n"
        "Pelos próximos 30 dias após a consulta, você conta com a facilidade de acessar todo o material "
        "da consulta (plano alimentar, receitas e prescrições, orientações, pedidos de exame, etc) pelo "
        "aplicativo da Dra. Sabrina.\n\n"
        "O seu acompanhamento será feito pelo chat do app. Uma vez por semana durante os 30 dias, "
        "a Dra acessa o chat para responder a todas as suas dúvidas."
    ),
}


class CannedResponseStore(KnowledgeBasePort):
    def __init__(self, responses: dict[str, str] | None = None) -> None:
        self._responses = responses if responses is not None else CANNED_RESPONSES

    def get_response(self, intent: str) -> str | None:
        return self._responses.get(intent)
